"""
Canned answers for when the language model cannot be used.

Selection is keyword driven: a well-known symbol (passed in or mentioned
in the question) gets its own text, then question keywords, then a
generic answer.
"""

from typing import Optional

DISCLAIMER_SUFFIX = "Educational only. Not investment advice."

SYMBOL_ANSWERS = {
    "RELIANCE": (
        "Reliance Industries is a diversified conglomerate with strong presence in petrochemicals, "
        "oil refining, and digital services through Jio. Key metrics include debt reduction, "
        "retail expansion, and green energy investments."
    ),
    "TCS": (
        "TCS is India's largest IT services company with consistent revenue growth and "
        "industry-leading margins (25%+). Strong digital transformation capabilities and a "
        "global client base provide stability."
    ),
    "HDFC": (
        "HDFC Bank maintains strong fundamentals with robust deposit growth, a quality loan book, "
        "and consistent profitability. Digital transformation and branch expansion support growth."
    ),
    "INFY": (
        "Infosys shows stable IT services growth with focus on digital technologies and cloud "
        "services. A strong cash position and dividend yield appeal to conservative investors."
    ),
}

RANKING_ANSWER = (
    "Rankings consider quantitative factors: returns, volatility, liquidity, and momentum. "
    "Risk-adjusted scores help evaluate investment potential across different time horizons."
)

DECISION_ANSWER = (
    "Investment decisions should consider individual financial goals, risk tolerance, and market "
    "conditions. Our analysis provides educational insights based on quantitative metrics and "
    "market data. Always consult qualified financial advisors."
)

GENERIC_ANSWER = (
    "Financial analysis considers multiple factors including company performance, market "
    "conditions, and sector trends. Our system evaluates these systematically for educational "
    "insights."
)


def _symbol_in_question(question: str) -> Optional[str]:
    lower_q = question.lower()
    for symbol in SYMBOL_ANSWERS:
        if symbol.lower() in lower_q:
            return symbol
    return None


def canned_answer(symbol: Optional[str], question: str) -> str:
    key = (symbol or "").strip().upper()
    if key not in SYMBOL_ANSWERS:
        key = _symbol_in_question(question) or ""

    if key:
        body = SYMBOL_ANSWERS[key]
    else:
        lower_q = question.lower()
        if "score" in lower_q or "rank" in lower_q:
            body = RANKING_ANSWER
        elif any(word in lower_q for word in ("buy", "sell", "invest")):
            body = DECISION_ANSWER
        else:
            body = GENERIC_ANSWER

    return f"{body} {DISCLAIMER_SUFFIX}"
