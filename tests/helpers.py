import base64
from io import BytesIO
from unittest.mock import MagicMock

import requests
from PIL import Image


def make_image_bytes(width: int = 40, height: int = 20, fmt: str = "PNG", color: str = "navy") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_data_url(width: int = 40, height: int = 20) -> str:
    return "data:image/png;base64," + base64.b64encode(make_image_bytes(width, height)).decode("ascii")


def make_response(content: bytes = b"", status: int = 200, content_type: str = "image/png") -> MagicMock:
    response = MagicMock()
    response.content = content
    response.status_code = status
    response.headers = {"Content-Type": content_type}
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    else:
        response.raise_for_status.return_value = None
    return response
