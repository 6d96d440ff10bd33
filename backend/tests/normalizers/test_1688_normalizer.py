from mallbridge.core.config import settings
from mallbridge.normalizers import normalize_1688
from mallbridge.normalizers.common import split_sku_key


PROXY = settings.IMAGE_PROXY_URL


def _raw():
    return {
        "result": {
            "success": True,
            "result": {
                "offerId": 977208207464,
                "subject": "儿童保温杯",
                "subjectTrans": "Kids thermos cup",
                "description": (
                    '<div><p>品牌介绍</p><img src="https://cbu01.alicdn.com/d1.jpg" alt="x">'
                    "<span>文字</span><img src='//cbu01.alicdn.com/d2.jpg'/></div>"
                ),
                "productImage": {"images": ["https://cbu01.alicdn.com/m1.jpg", "https://cbu01.alicdn.com/m2.jpg"]},
                "productSkuInfos": [
                    {
                        "skuId": 501, "specId": "spec-a", "price": "12.50", "amountOnSale": 88,
                        "skuAttributes": [
                            {"attributeId": 3216, "attributeName": "颜色", "attributeNameTrans": "Color",
                             "value": "粉色", "valueTrans": "Pink", "skuImageUrl": "https://cbu01.alicdn.com/pink.jpg"},
                            {"attributeId": 450, "attributeName": "容量", "attributeNameTrans": "Capacity",
                             "value": "350ml", "valueTrans": "350ml"},
                        ],
                    },
                    {
                        "skuId": 502, "specId": "spec-b", "consignPrice": "13.00", "amountOnSale": 7,
                        "skuAttributes": [
                            {"attributeId": 3216, "attributeName": "颜色", "value": "蓝色"},
                            {"attributeId": 450, "attributeName": "容量", "attributeNameTrans": "Capacity",
                             "value": "500ml", "valueTrans": "500ml"},
                        ],
                    },
                    {"skuId": 503, "specId": "spec-c", "price": "9.9"},
                ],
                "productAttribute": [
                    {"attributeId": 100, "attributeName": "材质", "attributeNameTrans": "Material",
                     "value": "不锈钢", "valueTrans": "Stainless steel"},
                    {"attributeId": 3216, "attributeName": "颜色", "attributeNameTrans": "Colour",
                     "value": "粉色", "valueTrans": "Rose"},
                ],
                "productShippingInfo": {
                    "skuShippingDetails": [{"weight": 0.35, "length": 10, "width": 8, "height": 20}],
                },
                "productSaleInfo": {"amountOnSale": 95},
                "minOrderQuantity": 2,
                "soldOut": 1234,
                "sellerOpenId": "BBBxyz",
            },
        }
    }


def test_1688_basic_fields():
    env = normalize_1688(_raw())
    assert env.ok
    d = env.data

    assert d.product_item_id == "977208207464"
    assert d.product_platform == "1688"
    assert d.product_link == "https://detail.1688.com/offer/977208207464.html"
    assert d.product_name == "Kids thermos cup"
    assert d.product_image_url == f"{PROXY}?url=https://cbu01.alicdn.com/m1.jpg"
    assert [i.url for i in d.product_image_list] == [
        f"{PROXY}?url=https://cbu01.alicdn.com/m1.jpg",
        f"{PROXY}?url=https://cbu01.alicdn.com/m2.jpg",
    ]
    assert d.product_price == 12.5
    assert d.current_price_usd == 1.75
    assert d.product_freight_amount_cny == 6
    assert d.product_freight_amount_usd == 0.9
    assert d.min_num == 2
    assert d.num == 95
    assert d.sales == 1234
    assert d.store_id == "BBBxyz"
    assert d.item_weight == "0.35"
    assert d.item_size == "10x8x20"


def test_1688_description_keeps_only_proxied_images():
    d = normalize_1688(_raw()).data
    assert d.product_details == (
        f'<img src="{PROXY}?url=https://cbu01.alicdn.com/d1.jpg"/>'
        f'<img src="{PROXY}?url=https://cbu01.alicdn.com/d2.jpg"/>'
    )


def test_1688_matrix_uses_translated_names():
    d = normalize_1688(_raw()).data

    color, capacity = d.prop_list
    assert (color.prop_type, color.prop_name) == ("3216", "Color")
    assert [(v.p_value, v.p_name) for v in color.prop_list] == [("3216:粉色", "Pink"), ("3216:蓝色", "蓝色")]
    assert color.prop_list[0].p_sku_img == f"{PROXY}?url=https://cbu01.alicdn.com/pink.jpg"
    assert color.prop_list[1].p_sku_img == ""
    assert [v.p_value for v in capacity.prop_list] == ["450:350ml", "450:500ml"]

    assert list(d.sku_list) == ["3216:粉色;450:350ml", "3216:蓝色;450:500ml"]
    pink = d.sku_list["3216:粉色;450:350ml"]
    assert pink.price == 12.5
    assert pink.sku_id == "501-spec-a"
    assert pink.quantity == 88
    assert pink.properties_name == "Color:Pink;Capacity:350ml"
    assert d.sku_list["3216:蓝色;450:500ml"].price == 13.0


def test_1688_origin_merges_product_attributes_without_overriding_skus():
    d = normalize_1688(_raw()).data
    assert d.props_list_origin["100:不锈钢"] == "Material:Stainless steel"
    assert d.props_list_origin["3216:粉色"] == "Color:Pink"
    for sku in d.sku_list.values():
        tokens = split_sku_key(sku.properties)
        assert sku.properties_name.split(";") == [d.props_list_origin[t] for t in tokens]


def test_1688_invalid_input():
    for bad in (None, {}, {"result": {}}, {"result": {"result": None}}, {"result": {"result": {"subject": "x"}}}):
        env = normalize_1688(bad)
        assert env.code == -1
        assert env.data is None


def test_1688_promotion_url_preferred():
    raw = _raw()
    raw["result"]["result"]["promotionUrl"] = "https://detail.1688.com/offer/977208207464.html?kj=1"
    assert normalize_1688(raw).data.product_link.endswith("?kj=1")
