# utils.py

RESULT_COLORS = {
    "hit": "#8fd694",      # green
    "miss": "#f6d186",     # amber
    "replace": "#f28b82",  # red
}


def get_color(result):
    """Return a color for an access result."""
    return RESULT_COLORS.get(result.kind, "#d3d3d3")


def get_frame_color(page) -> str:
    """Return a color for a frame: free, dirty, referenced or idle."""
    if page is None:
        return "lightgray"
    if page.dirty:
        return "salmon"
    if page.referenced:
        return "lightgreen"
    return "lightblue"


def frame_label(frame_index: int, page) -> str:
    if page is None:
        return f"F{frame_index}: Free"
    flags = ("R" if page.referenced else "") + ("D" if page.dirty else "")
    return f"F{frame_index}: P{page.page_number}" + (f" [{flags}]" if flags else "")


def result_label(result, record=None) -> str:
    """Short text for a result, e.g. 'HIT' or 'EVICT P1 @F0'."""
    if result.kind == "hit":
        text = "HIT"
    elif result.kind == "miss":
        text = "MISS"
    else:
        text = f"EVICT P{result.replaced_page} @F{result.frame_index}"
    return f"{record} {text}" if record is not None else text
