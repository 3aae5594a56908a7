from domain.transaction import AssetId

ALGO = AssetId("ALGO")
BTC = AssetId("BTC")
ETH = AssetId("ETH")
XLM = AssetId("XLM")
