"""Provides `partition_html()`."""

from __future__ import annotations

from typing import IO, Any, Optional

import requests

from html_nlcst.config import env_config
from html_nlcst.documents.location import VirtualFile
from html_nlcst.documents.nlcst import RootNode
from html_nlcst.file_utils.encoding import read_txt_file
from html_nlcst.logger import logger
from html_nlcst.nlp.tokenize import Parser
from html_nlcst.partition.html.convert import to_nlcst
from html_nlcst.partition.html.parser import parse_html
from html_nlcst.utils import exactly_one, lazyproperty


def partition_html(
    filename: Optional[str] = None,
    *,
    file: Optional[IO[bytes]] = None,
    text: Optional[str] = None,
    url: Optional[str] = None,
    encoding: Optional[str] = None,
    headers: dict[str, str] = {},
    ssl_verify: Optional[bool] = None,
    parser: Any = Parser,
) -> RootNode:
    """Turns an HTML document into a natural-language tree.

    HTML source parameters
    ----------------------
    The HTML to be converted can be specified four different ways:

    filename
        A string defining the target filename path.
    file
        A file-like object using "rb" mode --> open(filename, "rb").
    text
        The string representation of the HTML document.
    url
        The URL of a webpage to parse. Only for URLs that return an HTML document.
    headers
        The HTTP headers to be used in the HTTP request when `url` is specified.
    ssl_verify
        If the URL parameter is set, determines whether or not SSL verification is performed
        on the HTTP request. Defaults to the `HTTP_SSL_VERIFY` environment setting.
    encoding
        The encoding method used to decode the text input. If None, it is detected.

    Other parameters
    ----------------
    parser
        The natural-language tokenizer, a class or an instance. Defaults to the built-in `Parser`.
    """
    # -- a blank document has no paragraphs but is still a valid document, skip source checks --
    if text is not None and text.strip() == "" and not file and not filename and not url:
        virtual_file = VirtualFile(text)
    else:
        virtual_file = HtmlPartitionerOptions(
            file_path=filename,
            file=file,
            text=text,
            url=url,
            encoding=encoding,
            headers=headers,
            ssl_verify=env_config.HTTP_SSL_VERIFY if ssl_verify is None else ssl_verify,
        ).virtual_file
    tree = parse_html(virtual_file)

    return to_nlcst(tree, virtual_file, parser)


class HtmlPartitionerOptions:
    """Encapsulates source validation and loading of the HTML document."""

    def __init__(
        self,
        *,
        file_path: Optional[str],
        file: Optional[IO[bytes]],
        text: Optional[str],
        url: Optional[str],
        encoding: Optional[str],
        headers: dict[str, str],
        ssl_verify: bool,
    ):
        exactly_one(filename=file_path, file=file, text=text, url=url)

        self._file_path = file_path
        self._file = file
        self._text = text
        self._url = url
        self._encoding = encoding
        self._headers = headers
        self._ssl_verify = ssl_verify

    @lazyproperty
    def html_text(self) -> str:
        """The HTML document as a string, loaded from wherever the caller specified."""
        if self._file_path:
            return read_txt_file(filename=self._file_path, encoding=self._encoding)[1]

        if self._file:
            return read_txt_file(file=self._file, encoding=self._encoding)[1]

        if self._text is not None:
            return str(self._text)

        if self._url:
            return self._fetch(self._url)

        raise ValueError("Exactly one of filename, file, text, and url must be specified.")

    @lazyproperty
    def source_path(self) -> Optional[str]:
        """Where the document came from, when it came from somewhere."""
        return self._file_path or self._url or None

    @lazyproperty
    def virtual_file(self) -> VirtualFile:
        """The loaded document, ready for the parser and converter."""
        return VirtualFile(self.html_text, path=self.source_path)

    def _fetch(self, url: str) -> str:
        logger.detail("fetching HTML document from %s", url)  # type: ignore[attr-defined]
        response = requests.get(
            url, headers=self._headers, verify=self._ssl_verify, timeout=env_config.HTTP_TIMEOUT
        )
        if not response.ok:
            raise ValueError(f"Error status code on GET of provided URL: {response.status_code}")

        content_type = response.headers.get("Content-Type", "")
        if not content_type.startswith("text/html"):
            raise ValueError(f"Expected content type text/html. Got {content_type}.")

        return response.text
