"""Display formatting shared by notification texts and payment parameters"""


def format_price(amount: int) -> str:
    """Format a KRW amount, e.g. 1500000 -> "₩1,500,000" """
    sign = "-" if amount < 0 else ""
    return f"{sign}₩{abs(int(round(amount))):,}"


def truncate(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    return text[:length] + "..."
