"""English rendering of invoice totals, e.g. 'One Hundred Ten and 50/100 USD'."""

from decimal import Decimal

from invoicing.shared.numeric import ZERO, quantize_money

ONES = [
    "Zero",
    "One",
    "Two",
    "Three",
    "Four",
    "Five",
    "Six",
    "Seven",
    "Eight",
    "Nine",
    "Ten",
    "Eleven",
    "Twelve",
    "Thirteen",
    "Fourteen",
    "Fifteen",
    "Sixteen",
    "Seventeen",
    "Eighteen",
    "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]
SCALES = [
    (10**12, "Trillion"),
    (10**9, "Billion"),
    (10**6, "Million"),
    (10**3, "Thousand"),
]


def _below_thousand(number: int) -> list[str]:
    words: list[str] = []
    hundreds, rest = divmod(number, 100)
    if hundreds:
        words += [ONES[hundreds], "Hundred"]
    if rest >= 20:
        tens, ones = divmod(rest, 10)
        words.append(f"{TENS[tens]}-{ONES[ones]}" if ones else TENS[tens])
    elif rest:
        words.append(ONES[rest])
    return words


def integer_to_words(number: int) -> str:
    """Spell out a non-negative integer in title-case English."""
    if number == 0:
        return ONES[0]

    words: list[str] = []
    for scale, name in SCALES:
        count, number = divmod(number, scale)
        if count:
            words += integer_to_words(count).split() if count >= 1000 else _below_thousand(count)
            words.append(name)
    words += _below_thousand(number)
    return " ".join(words)


def amount_in_words(amount: Decimal, currency: str | None = None) -> str:
    """Render a monetary amount in words, qualified by its currency code.

    Args:
        amount: Amount to render (rounded to cents first)
        currency: ISO currency code appended to the text, if any

    Returns:
        Text such as 'One Thousand Two Hundred Thirty-Four and 56/100 USD'
    """
    value = quantize_money(amount)
    negative = value < ZERO
    value = abs(value)

    units = int(value)
    cents = int((value - units) * 100)

    text = integer_to_words(units)
    if cents:
        text = f"{text} and {cents:02d}/100"
    if negative:
        text = f"Minus {text}"
    if currency:
        text = f"{text} {currency}"
    return text
