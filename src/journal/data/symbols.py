"""
Instrument table: pip size and pip value per standard lot, plus the two-tier
resolution (per-pair override from settings, then table default).
"""
from typing import Dict, Optional

# Used when a resolved value is not a positive number.
FALLBACK_PIP_SIZE = 0.0001
FALLBACK_PIP_VALUE = 10.0

# Table default for pairs that are not listed.
UNLISTED_PIP_SIZE = 1.0
UNLISTED_PIP_VALUE = 10.0

_FOREX_MAJORS = ["EURUSD", "GBPUSD", "USDCHF", "AUDUSD", "USDCAD", "NZDUSD"]
_FOREX_MINORS = [
    "EURGBP", "EURCHF", "EURAUD", "EURCAD", "EURNZD",
    "GBPCHF", "GBPAUD", "GBPCAD", "GBPNZD",
    "AUDCHF", "AUDCAD", "AUDNZD", "NZDCHF", "NZDCAD", "CADCHF",
]
_FOREX_EXOTICS = [
    "USDTRY", "USDZAR", "USDMXN", "USDBRL", "USDRUB",
    "EURPLN", "EURCZK", "EURTRY", "GBPTRY", "GBPZAR", "GBPPLN",
]
_JPY_PAIRS = ["USDJPY", "EURJPY", "GBPJPY", "AUDJPY", "NZDJPY", "CADJPY", "CHFJPY"]
_STOCKS = [
    "AAPL", "MSFT", "GOOGL", "AMZN", "TSLA", "META", "NVDA", "NFLX", "ADBE", "CRM",
    "ORCL", "INTC", "AMD", "PYPL", "UBER", "ZOOM", "SHOP", "SQ", "TWTR", "SNAP",
    "JPM", "BAC", "WFC", "C", "GS", "MS", "USB", "PNC", "TFC", "COF",
    "JNJ", "PFE", "UNH", "ABBV", "MRK", "TMO", "ABT", "DHR", "BMY", "AMGN",
]
_ETFS = [
    "SPY", "VOO", "IVV", "VTI", "QQQ", "DIA", "IWM", "VEA", "VWO", "AGG",
    "BND", "VNQ", "GLD", "SLV", "USO", "TLT", "HYG", "LQD", "EFA", "EEM",
]

# (pip size, pip value per standard lot in USD)
INSTRUMENTS: Dict[str, tuple] = {
    **{p: (0.0001, 10.0) for p in _FOREX_MAJORS + _FOREX_MINORS + _FOREX_EXOTICS},
    **{p: (0.01, 9.3) for p in _JPY_PAIRS},
    "EURHUF": (0.01, 10.0),
    # Metals
    "XAUUSD": (0.1, 1.0),
    "XAGUSD": (0.001, 5.0),
    "XPTUSD": (0.1, 1.0),
    "XPDUSD": (0.1, 1.0),
    "COPPER": (0.0001, 2.5),
    # Energy
    "USOIL": (0.01, 10.0),
    "UKOIL": (0.01, 10.0),
    "NGAS": (0.001, 10.0),
    "GASOIL": (0.25, 10.0),
    # Agriculture
    "WHEAT": (0.25, 50.0),
    "CORN": (0.25, 50.0),
    "SOYBEAN": (0.25, 50.0),
    "SUGAR": (0.01, 112.0),
    "COFFEE": (0.05, 37.5),
    "COCOA": (1.0, 10.0),
    "COTTON": (0.01, 50.0),
    # Crypto, $1 per pip
    "BTCUSD": (1.0, 1.0),
    "ETHUSD": (0.01, 1.0),
    "BNBUSD": (0.001, 1.0),
    "XRPUSD": (0.0001, 1.0),
    "ADAUSD": (0.0001, 1.0),
    "SOLUSD": (0.001, 1.0),
    "DOTUSD": (0.001, 1.0),
    "AVAXUSD": (0.001, 1.0),
    "MATICUSD": (0.0001, 1.0),
    "LINKUSD": (0.001, 1.0),
    "LTCUSD": (0.01, 1.0),
    "BCHUSD": (0.01, 1.0),
    "XLMUSD": (0.00001, 1.0),
    "VETUSD": (0.00001, 1.0),
    "FILUSD": (0.001, 1.0),
    "TRXUSD": (0.00001, 1.0),
    "ETCUSD": (0.001, 1.0),
    "ALGOUSD": (0.0001, 1.0),
    "ATOMUSD": (0.001, 1.0),
    "XTZUSD": (0.0001, 1.0),
    "COMPUSD": (0.01, 1.0),
    "YFIUSD": (1.0, 1.0),
    "UNIUSD": (0.001, 1.0),
    "AAVEUSD": (0.001, 1.0),
    "MKRUSD": (0.01, 1.0),
    "SNXUSD": (0.001, 1.0),
    "CRVUSD": (0.0001, 1.0),
    "SUSHIUSD": (0.0001, 1.0),
    "BALUSD": (0.001, 1.0),
    "RENUSD": (0.0001, 1.0),
    "PANCAKEUSD": (0.001, 1.0),
    # Indices
    "US30": (1.0, 1.0),
    "NAS100": (0.25, 1.0),
    "SPX500": (0.1, 1.0),
    "US2000": (0.1, 1.0),
    "VIX": (0.01, 1.0),
    "GER40": (0.5, 1.0),
    "UK100": (0.5, 1.0),
    "FRA40": (0.5, 1.0),
    "ESP35": (0.5, 1.0),
    "ITA40": (1.0, 1.0),
    "AUS200": (0.5, 1.0),
    "JPN225": (1.0, 1.0),
    "HK50": (0.5, 1.0),
    "CHINA50": (0.5, 1.0),
    # Stocks and ETFs: $1 per 0.01 move
    **{p: (0.01, 100.0) for p in _STOCKS + _ETFS},
}


def normalize_symbol(s: str) -> str:
    return s.upper().strip()


def is_supported(symbol: str) -> bool:
    return normalize_symbol(symbol) in INSTRUMENTS


def resolve_pip_size(pair: str, custom_pip_size: Optional[float] = None) -> float:
    """Override if positive, else table value, else UNLISTED_PIP_SIZE."""
    if custom_pip_size is not None and custom_pip_size > 0:
        return float(custom_pip_size)
    entry = INSTRUMENTS.get(normalize_symbol(pair or ""))
    return entry[0] if entry else UNLISTED_PIP_SIZE


def resolve_pip_value(pair: str, custom_pip_value: Optional[float] = None) -> float:
    """Override if positive, else table value, else UNLISTED_PIP_VALUE."""
    if custom_pip_value is not None and custom_pip_value > 0:
        return float(custom_pip_value)
    entry = INSTRUMENTS.get(normalize_symbol(pair or ""))
    return entry[1] if entry else UNLISTED_PIP_VALUE
