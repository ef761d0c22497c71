from html_nlcst.partition.html.convert import to_nlcst
from html_nlcst.partition.html.parser import parse_html
from html_nlcst.partition.html.partition import partition_html

__all__ = ["parse_html", "partition_html", "to_nlcst"]
