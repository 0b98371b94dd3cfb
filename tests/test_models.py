import dataclasses

import pytest

from blog_scout.crawler.models import ExtractedContent
from blog_scout.errors import FailureKind


def test_tags_cannot_be_changed_in_place():
    content = ExtractedContent.succeeded("https://a.tistory.com/1", "t", "본문", tags=["여행", "맛집"])
    assert content.tags == ("여행", "맛집")
    with pytest.raises(AttributeError):
        content.tags.append("카페")
    with pytest.raises(dataclasses.FrozenInstanceError):
        content.tags = ("카페",)


def test_to_dict_lists_tags():
    content = ExtractedContent.succeeded("https://a.tistory.com/1", "t", "가 나", tags=("여행",))
    data = content.to_dict()
    assert data["tags"] == ["여행"]
    assert data["content_length"] == 2
    assert data["failure_kind"] is None


def test_rejected_keeps_metadata():
    content = ExtractedContent.succeeded("https://a.tistory.com/1", "t", "가나다", image_count=2, tags=["여행"])
    rejected = content.rejected("content too short: 3 chars (minimum 300)")
    assert rejected.success is False
    assert rejected.text_content == ""
    assert (rejected.content_length, rejected.image_count, rejected.tags) == (3, 2, ("여행",))
    assert rejected.failure_kind is FailureKind.QUALITY
    assert not rejected.is_retryable


def test_failed_network_record_is_retryable():
    failed = ExtractedContent.failed("https://a.tistory.com/1", "t", "all URL attempts failed", FailureKind.NETWORK)
    assert failed.is_retryable
    assert failed.tags == ()
