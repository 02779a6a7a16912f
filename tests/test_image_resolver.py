import asyncio
import base64
import time

import pytest
import requests

from rentaldocs.utils.exceptions import ImageResolutionError
from rentaldocs.utils.image_fetchers import (HttpImageFetcher, ImageFetcher, InlineImageFetcher,
                                             LocalAssetFetcher, is_absolute_url, is_inline_reference)
from rentaldocs.utils.image_resolver import ImageResolver, build_image_resolver

from .helpers import make_data_url, make_image_bytes, make_response


@pytest.mark.parametrize("reference,inline,absolute", [
    ("data:image/png;base64,AAAA", True, False),
    ("https://cdn.example.com/sig.png", False, True),
    ("HTTP://cdn.example.com/sig.png", False, True),
    ("/sed.jpg", False, False),
    ("dna-group-logo.png", False, False),
])
def test_reference_classification(reference, inline, absolute):
    assert is_inline_reference(reference) is inline
    assert is_absolute_url(reference) is absolute


@pytest.mark.asyncio
async def test_inline_reference_is_decoded_without_network(test_config, fake_session):
    resolver = build_image_resolver(test_config, session=fake_session)

    image = await resolver.resolve(make_data_url(120, 40))

    assert (image.width, image.height) == (120, 40)
    assert image.mime_type == "image/png"
    fake_session.get.assert_not_called()


@pytest.mark.asyncio
async def test_inline_reference_with_undecodable_image_uses_fallback_size(test_config, fake_session):
    reference = "data:image/png;base64," + base64.b64encode(b"not really a png").decode()
    resolver = build_image_resolver(test_config, session=fake_session)

    image = await resolver.resolve(reference)

    assert (image.width, image.height) == (200, 200)


@pytest.mark.asyncio
async def test_malformed_base64_raises(test_config, fake_session):
    resolver = build_image_resolver(test_config, session=fake_session)

    with pytest.raises(ImageResolutionError):
        await resolver.resolve("data:image/png;base64,@@@not-base64@@@")


@pytest.mark.asyncio
async def test_absolute_url_is_downloaded(test_config, fake_session):
    fake_session.get.side_effect = None
    fake_session.get.return_value = make_response(make_image_bytes(64, 32, "JPEG"), content_type="image/jpeg")
    resolver = build_image_resolver(test_config, session=fake_session)

    image = await resolver.resolve("https://cdn.example.com/signature.jpg")

    assert (image.width, image.height) == (64, 32)
    assert image.mime_type == "image/jpeg"
    assert image.data_url.startswith("data:image/jpeg;base64,")
    fake_session.get.assert_called_once_with("https://cdn.example.com/signature.jpg", timeout=2.0)


@pytest.mark.asyncio
async def test_absolute_url_without_content_type_is_sniffed(test_config, fake_session):
    fake_session.get.side_effect = None
    fake_session.get.return_value = make_response(make_image_bytes(10, 10), content_type="")
    resolver = build_image_resolver(test_config, session=fake_session)

    image = await resolver.resolve("https://cdn.example.com/signature")

    assert image.mime_type == "image/png"


@pytest.mark.asyncio
async def test_http_error_raises_resolution_error(test_config, fake_session):
    fake_session.get.side_effect = None
    fake_session.get.return_value = make_response(b"", status=404)
    resolver = build_image_resolver(test_config, session=fake_session)

    with pytest.raises(ImageResolutionError) as exc_info:
        await resolver.resolve("https://cdn.example.com/missing.png")

    assert isinstance(exc_info.value.cause, requests.HTTPError)


@pytest.mark.asyncio
async def test_relative_path_is_read_from_static_root(test_config, fake_session):
    (test_config.STATIC_ROOT / "sed.jpg").write_bytes(make_image_bytes(300, 100, "JPEG"))
    resolver = build_image_resolver(test_config, session=fake_session)

    image = await resolver.resolve("/sed.jpg")

    assert (image.width, image.height) == (300, 100)
    assert image.mime_type == "image/jpeg"
    fake_session.get.assert_not_called()


@pytest.mark.asyncio
async def test_relative_path_falls_back_to_site_origin(test_config, fake_session):
    test_config.SITE_ORIGIN = "https://rentals.example.com"
    fake_session.get.side_effect = None
    fake_session.get.return_value = make_response(make_image_bytes(50, 25))
    resolver = build_image_resolver(test_config, session=fake_session)

    image = await resolver.resolve("/images/dna-group-logo.png")

    assert (image.width, image.height) == (50, 25)
    fake_session.get.assert_called_once_with("https://rentals.example.com/images/dna-group-logo.png", timeout=2.0)


@pytest.mark.asyncio
async def test_relative_path_without_origin_fails_when_file_missing(test_config, fake_session):
    resolver = build_image_resolver(test_config, session=fake_session)

    with pytest.raises(ImageResolutionError) as exc_info:
        await resolver.resolve("/missing.png")

    assert exc_info.value.reference == "/missing.png"
    fake_session.get.assert_not_called()


def test_local_fetcher_refuses_paths_outside_static_root(tmp_path):
    (tmp_path / "secret.png").write_bytes(make_image_bytes())
    fetcher = LocalAssetFetcher(tmp_path / "public")

    with pytest.raises(ImageResolutionError):
        fetcher.fetch("../secret.png")


@pytest.mark.asyncio
@pytest.mark.parametrize("reference", ["", "   ", None])
async def test_empty_reference_raises(test_config, fake_session, reference):
    resolver = build_image_resolver(test_config, session=fake_session)

    with pytest.raises(ImageResolutionError):
        await resolver.resolve(reference)


@pytest.mark.asyncio
async def test_resolving_twice_gives_identical_dimensions(test_config, fake_session):
    fake_session.get.side_effect = None
    fake_session.get.return_value = make_response(make_image_bytes(77, 33))
    resolver = build_image_resolver(test_config, session=fake_session)

    first = await resolver.resolve("https://cdn.example.com/sig.png")
    second = await resolver.resolve("https://cdn.example.com/sig.png")

    assert (first.width, first.height) == (second.width, second.height) == (77, 33)
    assert fake_session.get.call_count == 2


class SlowFetcher(ImageFetcher):
    name = "slow"

    def supports(self, reference):
        return True

    def fetch(self, reference):
        time.sleep(0.5)
        return InlineImageFetcher().fetch(make_data_url())


@pytest.mark.asyncio
async def test_deadline_counts_as_resolution_failure():
    resolver = ImageResolver([SlowFetcher()])

    with pytest.raises(ImageResolutionError) as exc_info:
        await resolver.resolve("https://slow.example.com/sig.png", timeout=0.05)

    assert isinstance(exc_info.value.cause, asyncio.TimeoutError)


@pytest.mark.asyncio
async def test_later_fetcher_used_when_earlier_one_fails():
    class Broken(ImageFetcher):
        name = "broken"

        def supports(self, reference):
            return True

        def fetch(self, reference):
            raise ImageResolutionError(reference, message="boom")

    resolver = ImageResolver([Broken(), SlowFetcher()])

    image = await resolver.resolve("/anything.png")

    assert (image.width, image.height) == (40, 20)


def test_http_fetcher_only_handles_relative_paths_with_origin():
    assert HttpImageFetcher(origin=None).supports("/sed.jpg") is False
    assert HttpImageFetcher(origin="https://rentals.example.com").supports("/sed.jpg") is True
    assert HttpImageFetcher().supports("https://cdn.example.com/a.png") is True


@pytest.mark.parametrize("reference", ["https://[broken-host/sig.png", "http://[::1"])
def test_malformed_url_is_not_absolute(reference):
    assert is_absolute_url(reference) is False


@pytest.mark.asyncio
async def test_malformed_url_raises_resolution_error(test_config, fake_session):
    resolver = build_image_resolver(test_config, session=fake_session)

    with pytest.raises(ImageResolutionError) as exc_info:
        await resolver.resolve("https://[broken-host/sig.png")

    assert exc_info.value.reference == "https://[broken-host/sig.png"
    fake_session.get.assert_not_called()


@pytest.mark.asyncio
async def test_classification_failure_raises_resolution_error():
    class Picky(ImageFetcher):
        name = "picky"

        def supports(self, reference):
            raise ValueError("cannot classify")

        def fetch(self, reference):
            raise AssertionError("never reached")

    with pytest.raises(ImageResolutionError) as exc_info:
        await ImageResolver([Picky()]).resolve("/sed.jpg")

    assert isinstance(exc_info.value.cause, ValueError)


@pytest.mark.asyncio
async def test_line_wrapped_base64_is_decoded(test_config, fake_session):
    wrapped = base64.encodebytes(make_image_bytes(400, 120)).decode("ascii")
    assert "\n" in wrapped
    resolver = build_image_resolver(test_config, session=fake_session)

    image = await resolver.resolve("data:image/png;base64," + wrapped)

    assert (image.width, image.height) == (400, 120)
