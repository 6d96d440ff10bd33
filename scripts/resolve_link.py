import json
import sys

from mallbridge.core.logging import configure_logging
from mallbridge.services import LinkService


if __name__ == "__main__":
    configure_logging()
    text = " ".join(sys.argv[1:]) or sys.stdin.read()
    result = LinkService().get_link_details(text)
    print(json.dumps(result, ensure_ascii=False, indent=2))


# 运行
# export $(grep -v '^#' .env | xargs)   # 若你用 .env
# python scripts/resolve_link.py "https://weidian.com/item.html?itemID=7272754802"
# python scripts/resolve_link.py "【淘宝】https://e.tb.cn/h.xxxx?tk=yyyy CZ001 「商品标题」"



# 输出 data.platform / data.id 和前端 product-detail 跳转链接；解析失败输出 error
