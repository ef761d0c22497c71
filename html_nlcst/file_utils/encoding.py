from __future__ import annotations

from typing import IO, Optional, Tuple, Union

from chardet import detect

from html_nlcst.config import env_config
from html_nlcst.errors import UnprocessableEntityError
from html_nlcst.logger import logger

# popular encodings from https://en.wikipedia.org/wiki/Popularity_of_text_encodings
COMMON_ENCODINGS = [
    "utf_8",
    "iso_8859_1",
    "iso_8859_6",
    "iso_8859_8",
    "ascii",
    "big5",
    "utf_16",
    "utf_16_be",
    "utf_16_le",
    "utf_32",
    "utf_32_be",
    "utf_32_le",
    "euc_jis_2004",
    "euc_jisx0213",
    "euc_jp",
    "euc_kr",
    "gb18030",
    "shift_jis",
    "shift_jis_2004",
    "shift_jisx0213",
]


def format_encoding_str(encoding: str) -> str:
    """Format input encoding string (e.g., `utf-8`, `iso-8859-1`, etc).

    Parameters
    ----------
    encoding
        The encoding string to be formatted (e.g., `UTF-8`, `utf_8`, `ISO-8859-1`, `iso_8859_1`,
        etc).
    """
    formatted_encoding = encoding.lower().replace("_", "-")

    # Special case for Arabic and Hebrew charsets with directional annotations
    annotated_encodings = ["iso-8859-6-i", "iso-8859-6-e", "iso-8859-8-i", "iso-8859-8-e"]
    if formatted_encoding in annotated_encodings:
        formatted_encoding = formatted_encoding[:-2]  # remove the annotation

    return formatted_encoding


def detect_file_encoding(
    filename: str = "",
    file: Optional[Union[bytes, IO[bytes]]] = None,
) -> Tuple[str, str]:
    """Detect the encoding of a document and decode it; returns `(encoding, text)`.

    When chardet is not confident enough, each of `COMMON_ENCODINGS` is tried in turn.
    """
    byte_data = _read_bytes(filename, file)

    result = detect(byte_data)
    encoding = result["encoding"]
    confidence = result["confidence"] or 0.0

    if encoding is None or confidence < env_config.ENCODING_CONFIDENCE_THRESHOLD:
        logger.debug(
            "encoding detection not confident (%s, %.2f), trying common encodings",
            encoding,
            confidence,
        )
        for common_encoding in COMMON_ENCODINGS:
            try:
                file_text = byte_data.decode(common_encoding)
            except (UnicodeDecodeError, UnicodeError):
                continue
            encoding = common_encoding
            break
        else:
            raise UnprocessableEntityError(
                "Unable to determine file encoding or match it with any of the common encodings."
            )
    else:
        try:
            file_text = byte_data.decode(encoding)
        except (UnicodeDecodeError, UnicodeError):
            # -- raise from None so the undecodable bytes are not held by the exception chain --
            raise UnprocessableEntityError(
                f"Unable to decode document, detected {encoding!r} but decode failed."
            ) from None

    return format_encoding_str(encoding), file_text


def read_txt_file(
    filename: str = "",
    file: Optional[Union[bytes, IO[bytes]]] = None,
    encoding: Optional[str] = None,
) -> Tuple[str, str]:
    """Read a text document like an HTML file; returns `(encoding, text)`.

    `encoding` is detected when not given.
    """
    if not filename and file is None:
        raise FileNotFoundError("No filename was specified")

    if not encoding:
        return detect_file_encoding(filename=filename, file=file)

    formatted_encoding = format_encoding_str(encoding)

    if filename:
        with open(filename, encoding=formatted_encoding) as f:
            return formatted_encoding, f.read()

    assert file is not None
    file_content = file if isinstance(file, bytes) else file.read()
    if isinstance(file_content, bytes):
        return formatted_encoding, file_content.decode(formatted_encoding)
    return formatted_encoding, file_content


def _read_bytes(filename: str, file: Optional[Union[bytes, IO[bytes]]]) -> bytes:
    if filename:
        with open(filename, "rb") as f:
            return f.read()

    if file is None:
        raise FileNotFoundError("No filename nor file were specified")

    if isinstance(file, bytes):
        return file

    if hasattr(file, "seek"):
        file.seek(0)
    content = file.read()
    return content.encode("utf-8") if isinstance(content, str) else content
