import pytest

from src.core.exceptions import InvalidPackageError
from src.core.models import ContentType
from src.engine import credits


def test_image_cost_is_flat():
    assert credits.credits_needed(ContentType.IMAGE) == 2
    # audio and duration do not apply to images
    assert credits.credits_needed(ContentType.IMAGE, video_duration_seconds=30, include_audio=True) == 2


@pytest.mark.parametrize(
    "duration, audio, expected",
    [
        (None, False, 13),
        (5, False, 13),
        (3, True, 18),
        (6, False, 18),
        (10, True, 23),
    ],
)
def test_video_cost(duration, audio, expected):
    assert credits.credits_needed(ContentType.VIDEO, duration, audio) == expected


def test_sufficient_credits():
    assert credits.has_sufficient_credits(13, 13)
    assert not credits.has_sufficient_credits(12, 13)
    assert credits.has_sufficient_credits(0, 18, is_admin=True)


def test_quote_for_long_video_with_audio():
    result = credits.quote(ContentType.VIDEO, video_duration_seconds=8, include_audio=True, balance=20)

    assert result.credits_needed == 23
    assert result.is_short_video is False
    assert result.includes_audio is True
    assert result.sufficient is False


def test_quote_for_image():
    result = credits.quote(ContentType.IMAGE, include_audio=True, balance=2)

    assert result.credits_needed == 2
    assert result.includes_audio is False
    assert result.is_short_video is False
    assert result.sufficient is True


def test_validate_package():
    package = credits.validate_package("pro", 50.0, 650)
    assert package["credits"] == 650


@pytest.mark.parametrize(
    "package_id, amount, credit_count",
    [("pro", 49.0, 650), ("pro", 50.0, 600), ("platinum", 10.0, 100)],
)
def test_validate_package_rejects_mismatch(package_id, amount, credit_count):
    with pytest.raises(InvalidPackageError) as exc:
        credits.validate_package(package_id, amount, credit_count)
    assert exc.value.code == 400
