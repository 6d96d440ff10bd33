"""
平台集成层：抓取原始数据的外部协作方（HTTP 客户端 + 各平台接口）。
淘宝/1688 官方接口需要请求签名，不在这里实现，由调用方注入 fetch 函数。
"""
