from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Dict, Optional


# 统一平台编码（微店对外叫 micro）
TAOBAO = "taobao"
TMALL = "tmall"
ALIBABA_1688 = "1688"
WEIDIAN = "micro"

PLATFORMS = (TAOBAO, TMALL, ALIBABA_1688, WEIDIAN)

_ITEM_LINK_TEMPLATES: Dict[str, str] = {
    TAOBAO: "https://item.taobao.com/item.htm?id={id}",
    TMALL: "https://detail.tmall.com/item.htm?id={id}",
    ALIBABA_1688: "https://detail.1688.com/offer/{id}.html",
    WEIDIAN: "https://weidian.com/item.html?itemID={id}",
}


def build_item_link(platform: str, item_id: str) -> str:
    """(platform, id) → 平台商品页标准链接；未知平台返回 N/A。"""
    template = _ITEM_LINK_TEMPLATES.get(platform)
    return template.format(id=item_id) if template else "N/A"


@dataclass(frozen=True)
class ResolvedLink:
    """链接解析结果：解析失败一律用 None 表示，不用异常。"""
    platform: str
    id: str
    short_original_link: str

    @classmethod
    def of(cls, platform: str, item_id: str) -> "ResolvedLink":
        return cls(platform=platform, id=str(item_id), short_original_link=build_item_link(platform, str(item_id)))

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def as_platform(value: Optional[str]) -> Optional[str]:
    """把外部传入的平台写法归一（weidian → micro），不认识的返回 None。"""
    if not value:
        return None
    v = value.strip().lower()
    if v == "weidian":
        return WEIDIAN
    return v if v in PLATFORMS else None
