def quote_header_filename(filename: str) -> str:
    """
    Make a filename safe to embed in a quoted Content-Disposition parameter

    "report \"q1\".pdf" -> "report _q1_.pdf"

    @param filename:
    @return: the filename without quotes, backslashes and line breaks
    """
    return "".join("_" if char in '"\\\r\n' else char for char in filename)
