"""
mallbridge：跨境电商商品聚合引擎
   - links：任意链接 → (platform, item_id)
   - normalizers：各平台原始 JSON → 统一商品结构
   - cache：Redis + 进程内两级缓存
   - translation：批量翻译（缓存的永远是原文版本）
"""

__version__ = "0.1.0"
