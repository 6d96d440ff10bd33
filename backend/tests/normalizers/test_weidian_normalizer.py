import copy

from mallbridge.normalizers import normalize_weidian
from mallbridge.normalizers.common import split_sku_key


def _details():
    return {
        "itemId": "7272754802",
        "itemTitle": "复古运动鞋",
        "itemMainPic": "https://si.geilicdn.com/main.jpg",
        "itemStock": 120,
        "itemDiscountLowPrice": 25900,
        "attrList": [
            {
                "attrTitle": "颜色",
                "attrValues": [
                    {"attrId": 11, "attrValue": "白色", "img": "https://si.geilicdn.com/white.jpg"},
                    {"attrId": 12, "attrValue": "黑色", "img": "https://si.geilicdn.com/main.jpg"},
                ],
            },
            {
                "attrTitle": "尺码",
                "attrValues": [
                    {"attrId": 21, "attrValue": "40", "img": "https://si.geilicdn.com/size.jpg"},
                    {"attrId": 22, "attrValue": "41", "img": ""},
                ],
            },
        ],
        "skuInfos": [
            {"attrIds": [11, 21], "skuInfo": {"id": 9001, "discountPrice": 25900, "originalPrice": 29900, "stock": 5}},
            {"attrIds": [22, 12], "skuInfo": {"id": 9002, "discountPrice": 26900, "stock": 0}},
            {"attrIds": [], "skuInfo": {"id": 9003, "discountPrice": 1}},
            {"attrIds": [11, 99], "skuInfo": {"id": 9004, "discountPrice": 1}},
            {"attrIds": [12, 21]},
        ],
    }


def _description():
    return {
        "item_detail": {
            "desc_content": [
                {"type": 1, "text": "介绍文字"},
                {"type": 2, "url": "https://si.geilicdn.com/d1.jpg"},
                {"type": 2, "url": ""},
                {"type": 2, "url": "https://si.geilicdn.com/d2.jpg"},
            ]
        }
    }


def test_weidian_basic_fields():
    env = normalize_weidian(_details(), _description())
    assert env.ok
    d = env.data

    assert d.product_item_id == "7272754802"
    assert d.product_platform == "micro"
    assert d.product_link == "https://weidian.com/item.html?itemID=7272754802"
    assert d.product_name == "复古运动鞋"
    assert d.product_price == 259.0
    assert d.current_price_usd == 36.26
    assert d.product_freight_amount_cny == 10
    assert d.product_freight_amount_usd == 1.49
    assert d.num == 120
    assert d.store_id == "7272754802"

    # 主图在前，规格图去重后依次追加
    assert [i.url for i in d.product_image_list] == [
        "https://si.geilicdn.com/main.jpg",
        "https://si.geilicdn.com/white.jpg",
        "https://si.geilicdn.com/size.jpg",
    ]
    assert d.product_image_url == "https://si.geilicdn.com/main.jpg"


def test_weidian_description_html():
    d = normalize_weidian(_details(), _description()).data
    assert d.product_details.startswith('<div id="offer-template-0"></div><div style="width: 790.0px;">')
    assert d.product_details.count("<img ") == 2
    assert 'src="https://si.geilicdn.com/d1.jpg"' in d.product_details
    assert d.product_details.endswith("</div><p>&nbsp;&nbsp;</p>")

    assert normalize_weidian(_details(), None).data.product_details == ""
    assert normalize_weidian(_details(), {"item_detail": {"desc_content": [{"type": 1, "text": "x"}]}}).data.product_details == ""


def test_weidian_skus_keep_raw_attr_order():
    d = normalize_weidian(_details()).data

    # 空 attrIds / 未知 attrId / 缺 skuInfo 的条目全部跳过
    assert list(d.sku_list) == ["11;21", "22;12"]

    first = d.sku_list["11;21"]
    assert first.price == 259.0
    assert first.orginal_price == 299.0
    assert first.properties_name == "颜色:白色;尺码:40"
    assert first.sku_id == "9001"

    second = d.sku_list["22;12"]
    assert second.properties == "22;12"          # 不排序
    assert second.properties_name == "尺码:41;颜色:黑色"
    assert second.orginal_price == second.price == 269.0

    for sku in d.sku_list.values():
        assert sku.properties_name.split(";") == [d.props_list_origin[t] for t in split_sku_key(sku.properties)]


def test_weidian_size_group_has_no_sku_images():
    d = normalize_weidian(_details()).data
    color, size = d.prop_list
    assert (size.prop_type, size.prop_name) == ("尺码", "尺码")
    assert all(v.p_sku_img == "" for v in size.prop_list)
    assert color.prop_list[0].p_sku_img == "https://si.geilicdn.com/white.jpg"


def test_weidian_without_sku_data():
    details = _details()
    details.pop("attrList")
    details.pop("skuInfos")
    d = normalize_weidian(details).data
    assert d.prop_list == []
    assert d.sku_list == {}
    assert d.props_list_origin == {}
    assert [i.url for i in d.product_image_list] == ["https://si.geilicdn.com/main.jpg"]


def test_weidian_idempotent():
    a = normalize_weidian(_details(), _description()).to_dict()
    b = normalize_weidian(copy.deepcopy(_details()), copy.deepcopy(_description())).to_dict()
    a["data"].pop("api_time")
    b["data"].pop("api_time")
    assert a == b


def test_weidian_invalid_input():
    for bad in (None, {}, {"itemTitle": "x"}, []):
        env = normalize_weidian(bad)
        assert env.code == -1
        assert env.data is None


def test_weidian_repeated_or_blank_titles_stay_separate_groups():
    details = {
        "itemId": "3",
        "itemTitle": "套装",
        "attrList": [
            {"attrTitle": "款式", "attrValues": [{"attrId": 1, "attrValue": "A"}]},
            {"attrTitle": "款式", "attrValues": [{"attrId": 2, "attrValue": "B"}]},
            {"attrTitle": "", "attrValues": [{"attrId": 3, "attrValue": "C"}]},
        ],
        "skuInfos": [{"attrIds": [1, 2, 3], "skuInfo": {"id": 1, "discountPrice": 100}}],
    }
    d = normalize_weidian(details).data

    assert [(g.prop_type, g.prop_name) for g in d.prop_list] == [("款式", "款式"), ("款式#1", "款式"), ("#2", "")]
    assert [[v.p_value for v in g.prop_list] for g in d.prop_list] == [["1"], ["2"], ["3"]]
    assert d.sku_list["1;2;3"].properties_name == "款式:A;款式:B;:C"
