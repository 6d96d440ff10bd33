"""
各平台 normalizer 共用的小工具：
  - PropertyMatrix：有序的 规格组 → 规格值 结构（插入顺序即首次出现顺序）
  - 图片去重 / 协议补全 / 代理改写
"""
from __future__ import annotations
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional, Sequence
import re

from mallbridge.core.config import settings
from mallbridge.normalizers.models import ProductImage, PropertyGroup, PropertyValue


SKU_KEY_SEP = ";"


class PropertyMatrix:
    """
    group_key → PropertyGroup，组内按 p_value 去重；所有顺序都是显式的插入顺序，
    SKU 组合键和 props_list_origin 都从这里派生。
    """

    def __init__(self) -> None:
        self._groups: "OrderedDict[str, PropertyGroup]" = OrderedDict()
        self._values: "OrderedDict[str, tuple[PropertyGroup, PropertyValue]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, value_key: str) -> bool:
        return value_key in self._values

    def add(
        self,
        group_key: str,
        group_name: str,
        value_key: str,
        value_name: str,
        sku_img: str = "",
    ) -> PropertyValue:
        """登记一个规格值；重复出现时保留第一次的名称和图片。"""
        group = self._groups.get(group_key)
        if group is None:
            group = PropertyGroup(prop_type=group_key, prop_name=group_name or "", prop_list=[])
            self._groups[group_key] = group

        hit = self._values.get(value_key)
        if hit is not None:
            return hit[1]

        value = PropertyValue(p_value=value_key, p_name=value_name or "", p_sku_img=sku_img or "")
        group.prop_list.append(value)
        self._values[value_key] = (group, value)
        return value

    def groups(self) -> List[PropertyGroup]:
        return list(self._groups.values())

    def label(self, value_key: str) -> Optional[str]:
        hit = self._values.get(value_key)
        if hit is None:
            return None
        group, value = hit
        return f"{group.prop_name}:{value.p_name}"

    def origin(self) -> Dict[str, str]:
        """p_value → "组名:值名"。"""
        return {key: f"{g.prop_name}:{v.p_name}" for key, (g, v) in self._values.items()}

    def describe(self, tokens: Sequence[str]) -> Optional[str]:
        """按 tokens 原顺序拼 properties_name；任一 token 不认识返回 None。"""
        labels = []
        for token in tokens:
            label = self.label(token)
            if label is None:
                return None
            labels.append(label)
        return SKU_KEY_SEP.join(labels)


def join_sku_key(tokens: Iterable[str]) -> str:
    """按原始属性顺序拼组合键（不排序）。"""
    return SKU_KEY_SEP.join(tokens)


def split_sku_key(key: str) -> List[str]:
    return [t for t in (key or "").split(SKU_KEY_SEP) if t]


def origin_from_groups(groups: Sequence[PropertyGroup]) -> Dict[str, str]:
    """从（可能已翻译的）规格组重建 props_list_origin。"""
    out: Dict[str, str] = {}
    for group in groups:
        for value in group.prop_list:
            out[value.p_value] = f"{group.prop_name}:{value.p_name}"
    return out


# ============= images ===============

_IMG_SRC_RE = re.compile(r"src=[\"']((?:https?:)?//[^\"']+)[\"']")
_IMG_TAG_RE = re.compile(r"<img[^>]+>")


def text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def with_scheme(url: Optional[str]) -> str:
    """//img.alicdn.com/... → https://img.alicdn.com/..."""
    u = text(url)
    return "https:" + u if u.startswith("//") else u


def dedupe_images(urls: Iterable[Optional[str]]) -> List[str]:
    """去空、去重，保持首次出现顺序。"""
    seen: "OrderedDict[str, None]" = OrderedDict()
    for url in urls:
        u = text(url)
        if u and u not in seen:
            seen[u] = None
    return list(seen.keys())


def image_list(urls: Iterable[str]) -> List[ProductImage]:
    return [ProductImage(url=u) for u in dedupe_images(urls)]


def proxy_image(url: Optional[str]) -> str:
    u = text(url)
    return f"{settings.IMAGE_PROXY_URL}?url={u}" if u else ""


def proxy_description_images(html: Optional[str]) -> str:
    """
    描述 HTML → 只保留图片，且每张图都改走代理
    （描述里的文字和排版多为平台营销内容，前端不展示）。
    """
    if not html:
        return ""
    tags = []
    for tag in _IMG_TAG_RE.findall(html):
        m = _IMG_SRC_RE.search(tag)
        if m:
            tags.append(f'<img src="{proxy_image(with_scheme(m.group(1)))}"/>')
    return "".join(tags)
