"""Indian-style amount formatting used in scenario and suggestion text"""

CRORE = 10_000_000
LAKH = 100_000


def format_large_number(value: float) -> str:
    """Render 1,00,00,000+ as "X.XX Cr", 1,00,000+ as "X.XX L", otherwise a plain integer"""
    if value >= CRORE:
        return f"{value / CRORE:.2f} Cr"
    if value >= LAKH:
        return f"{value / LAKH:.2f} L"
    return f"{value:.0f}"


def format_rupees(value: float) -> str:
    """Whole-rupee amount with the ₹ sign, no grouping"""
    return f"₹{value:.0f}"
