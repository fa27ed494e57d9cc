"""Static ISO 4217 code -> display symbol table."""

CURRENCY_SYMBOLS = {
    "AED": "د.إ",
    "ARS": "$",
    "AUD": "A$",
    "BDT": "৳",
    "BGN": "лв",
    "BRL": "R$",
    "CAD": "CA$",
    "CHF": "CHF",
    "CLP": "$",
    "CNY": "CN¥",
    "COP": "$",
    "CZK": "Kč",
    "DKK": "kr",
    "EGP": "E£",
    "EUR": "€",
    "GBP": "£",
    "GHS": "GH₵",
    "HKD": "HK$",
    "HUF": "Ft",
    "IDR": "Rp",
    "ILS": "₪",
    "INR": "₹",
    "ISK": "kr",
    "JPY": "¥",
    "KES": "KSh",
    "KRW": "₩",
    "KZT": "₸",
    "MAD": "MAD",
    "MXN": "MX$",
    "MYR": "RM",
    "NGN": "₦",
    "NOK": "kr",
    "NZD": "NZ$",
    "PEN": "S/",
    "PHP": "₱",
    "PKR": "₨",
    "PLN": "zł",
    "QAR": "QR",
    "RON": "lei",
    "RUB": "₽",
    "SAR": "SR",
    "SEK": "kr",
    "SGD": "S$",
    "THB": "฿",
    "TRY": "₺",
    "TWD": "NT$",
    "UAH": "₴",
    "USD": "$",
    "VND": "₫",
    "ZAR": "R",
}


def symbol_for(code: str) -> str:
    """Display symbol for ``code``; unlisted codes display as the code itself."""
    code = code.strip().upper()
    return CURRENCY_SYMBOLS.get(code, code)
