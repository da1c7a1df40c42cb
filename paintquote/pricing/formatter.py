"""Plain-text rendering of a calculated quote."""


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _num(value) -> str:
    """4500.0 -> '4500', 12.5 -> '12.5'."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_for_customer(quote: dict, hide_internal_details: bool = True) -> str:
    """
    Render a QuoteCalculator result as the customer-facing text block.

    With hide_internal_details=False the overhead / markup lines and the
    internal review section are included.
    """
    materials = quote.get("materials", {})
    lines = ["=== PAINTING QUOTE ===", ""]

    primer = materials.get("primer")
    if primer:
        lines += [
            "PRIMER:",
            f"  Area: {_num(primer['sqft'])} sq ft",
            f"  Product: {primer['product']}",
            f"  Gallons: {primer['gallons']}",
            "",
        ]

    walls = materials.get("wall_paint")
    if walls:
        lines += [
            "WALLS:",
            f"  Area: {_num(walls['sqft'])} sq ft",
            f"  Product: {walls['product']}",
            f"  Gallons: {walls['gallons']} (two coats)",
            "",
        ]

    ceilings = materials.get("ceiling_paint")
    if ceilings:
        lines += [
            "CEILINGS:",
            f"  Area: {_num(ceilings['sqft'])} sq ft",
            f"  Product: {ceilings['product']}",
            f"  Gallons: {ceilings['gallons']} (two coats)",
            "",
        ]

    trim = materials.get("trim_paint")
    if trim:
        lines.append("TRIM/DOORS/WINDOWS:")
        if trim["doors_count"] > 0:
            lines.append(f"  Doors: {_num(trim['doors_count'])}")
        if trim["windows_count"] > 0:
            lines.append(f"  Windows: {_num(trim['windows_count'])}")
        lines += [
            f"  Product: {trim['product']}",
            f"  Gallons: {trim['gallons']}",
            "",
        ]

    lines += [
        "PRICING:",
        f"  Materials: {_money(materials.get('total', 0.0))}",
        f"  Labor: {_money(quote['labor']['total'])}",
        f"  Subtotal: {_money(quote['subtotal'])}",
    ]
    if not hide_internal_details:
        lines.append(f"  Overhead: {_money(quote['overhead'])}")
        lines.append(f"  Markup: {_money(quote['markup'])}")
    if quote.get("tax", 0) > 0:
        lines.append(f"  Tax: {_money(quote['tax'])}")

    lines += ["", f"TOTAL: {_money(quote['total'])}"]
    if quote.get("timeline"):
        lines.append(f"Estimated timeline: {quote['timeline']}")

    if not hide_internal_details:
        review = quote.get("internal_review", {})
        lines += [
            "",
            "=== INTERNAL REVIEW ===",
            f"Total with Overhead/Markup: {_money(review.get('total_with_overhead_markup', 0.0))}",
            f"Profit Margin: {_money(review.get('profit_margin', 0.0))}",
        ]

    return "\n".join(lines) + "\n"
