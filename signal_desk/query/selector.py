from signal_desk.upstream.models import SearchResult


def select_symbol(result: SearchResult) -> str:
    """Pick the symbol a signal request should be made for.

    Tickers use the normalized form directly. Companies use the best
    suggestion, falling back to the normalized form when there is none.
    """
    if result.type == "ticker":
        return result.normalized
    if result.suggestions:
        return result.suggestions[0]
    return result.normalized
