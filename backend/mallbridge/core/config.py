# 环境变量和配置
# pydantic‑settings 读取 .env = core/config.py

from typing import Optional
from pydantic import SecretStr, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# 本机直接跑脚本/测试时，会读取当前目录下的 .env；容器内一般直接注入环境变量

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
    )

    # ========= project config =========
    PROJECT_NAME: str = "MallBridge"
    ENVIRONMENT: str = "dev"
    LOG_LEVEL: str = Field("INFO", alias="LOG_LEVEL")
    FRONTEND_URL: str = Field("http://localhost:5173", alias="FRONTEND_URL")   # 生成 product-detail 跳转链接


    # ========= Cache（Redis 持久层 + 进程内层） =========
    # REDIS_URL 为空时只使用进程内缓存
    REDIS_URL: Optional[str] = Field(None, alias="REDIS_URL")
    REDIS_CONNECT_TIMEOUT: int = Field(10, ge=1, alias="REDIS_CONNECT_TIMEOUT")
    MAX_CACHE_ENTRIES: int = Field(1000, ge=1, alias="MAX_CACHE_ENTRIES")
    CACHE_EVICT_BATCH: int = Field(10, ge=1, alias="CACHE_EVICT_BATCH")                 # 满了一次淘汰 10 条
    CACHE_SWEEP_INTERVAL_SEC: int = Field(3600, ge=0, alias="CACHE_SWEEP_INTERVAL_SEC") # 0 = 不启动后台清理
    CACHE_MIRROR_TTL_SEC: int = Field(24 * 60 * 60, ge=1, alias="CACHE_MIRROR_TTL_SEC") # Redis 命中后回填内存的 TTL
    PRODUCT_CACHE_TTL_SEC: int = Field(12 * 60 * 60, ge=1, alias="PRODUCT_CACHE_TTL_SEC")
    LINK_CACHE_TTL_SEC: int = Field(24 * 60 * 60, ge=1, alias="LINK_CACHE_TTL_SEC")


    # ========= 语言 =========
    SOURCE_LANG: str = Field("zh", alias="SOURCE_LANG")     # 平台原始语言，缓存里只存这一份
    DEFAULT_LANG: str = Field("en", alias="DEFAULT_LANG")


    # ========= 链接解析 =========
    LINK_MAX_DEPTH: int = Field(3, ge=1, le=10, alias="LINK_MAX_DEPTH")          # 编码链接递归上限
    LINK_RESOLVE_TIMEOUT: float = Field(8.0, gt=0, alias="LINK_RESOLVE_TIMEOUT")  # 短链请求超时（秒）
    SHORT_LINK_USER_AGENT: str = Field(
        "Mozilla/5.0 (iPhone; CPU iPhone OS 13_2_3 like Mac OS X) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/13.0.3 Mobile/15E148 Safari/604.1",
        alias="SHORT_LINK_USER_AGENT",
    )


    # ========= 图片代理（只负责改写 URL，代理服务本身不在这里） =========
    IMAGE_PROXY_URL: str = Field("https://shariyy.com/image/image-proxy", alias="IMAGE_PROXY_URL")


    # ========= 翻译 =========
    TRANSLATOR_ENDPOINT: Optional[str] = Field(None, alias="TRANSLATOR_ENDPOINT")   # 未配置 = 原文直出
    TRANSLATOR_API_KEY: Optional[SecretStr] = Field(None, alias="TRANSLATOR_API_KEY")
    TRANSLATE_TIMEOUT: float = Field(8.0, gt=0, alias="TRANSLATE_TIMEOUT")
    TRANSLATE_MAX_WORKERS: int = Field(8, ge=1, le=64, alias="TRANSLATE_MAX_WORKERS")


    # ========= 出站 HTTP =========
    HTTP_CONNECT_TIMEOUT: float = Field(5.0, gt=0, alias="HTTP_CONNECT_TIMEOUT")
    HTTP_READ_TIMEOUT: float = Field(10.0, gt=0, alias="HTTP_READ_TIMEOUT")
    HTTP_MAX_ATTEMPTS: int = Field(3, ge=1, le=10, alias="HTTP_MAX_ATTEMPTS")


    # ========= Weidian（公开接口，无需签名） =========
    WEIDIAN_BASE_URL: str = Field("https://thor.weidian.com", alias="WEIDIAN_BASE_URL")
    WEIDIAN_USER_AGENT: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/114.0.0.0 Safari/537.36",
        alias="WEIDIAN_USER_AGENT",
    )


    # ========= OneBound（key/secret 放 query，无需签名） =========
    ONEBOUND_BASE_URL: str = Field("https://api-gw.onebound.cn", alias="ONEBOUND_BASE_URL")
    ONEBOUND_API_KEY: Optional[str] = Field(None, alias="ONEBOUND_API_KEY")
    ONEBOUND_API_SECRET: Optional[SecretStr] = Field(None, alias="ONEBOUND_API_SECRET")
    ONEBOUND_AREA_ID: str = Field("152501", alias="ONEBOUND_AREA_ID")     # item_fee 估算运费的地区


    @property
    def onebound_enabled(self) -> bool:
        return bool(self.ONEBOUND_API_KEY and self.ONEBOUND_API_SECRET)


settings = Settings()  # 只从环境读取（含 .env）
