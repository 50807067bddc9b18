from __future__ import annotations

from copysync.domain.model import (
    CopyDraft,
    CopyFields,
    CopyRecord,
    CopyStatus,
    CopyType,
    Scope,
    normalize_labels,
)


def test_scope_is_complete_requires_both_ids() -> None:
    assert Scope(site_id="s", user_id="u").is_complete
    assert not Scope(site_id="s", user_id=" ").is_complete
    assert not Scope(site_id="", user_id="u").is_complete


def test_draft_is_empty_only_when_title_and_body_are_blank() -> None:
    assert CopyDraft(title="  ", body="\n").is_empty
    assert not CopyDraft(title="", body="Some text").is_empty
    assert not CopyDraft(title="Headline").is_empty


def test_empty_draft_with_notes_is_still_empty() -> None:
    draft = CopyDraft(notes="remember to finish", labels=frozenset({"wip"}))

    assert draft.is_empty


def test_fields_normalise_optional_text_and_labels() -> None:
    draft = CopyDraft(
        title="Launch",
        audience="   ",
        notes="",
        use_case="Product launch",
        labels=frozenset({" promo ", "", "promo"}),
    )

    fields = draft.fields()

    assert fields.audience is None
    assert fields.notes is None
    assert fields.use_case == "Product launch"
    assert fields.labels == frozenset({"promo"})


def test_record_and_draft_fields_compare_equal_for_same_content() -> None:
    record = CopyRecord(
        id="a",
        scope=Scope(site_id="s", user_id="u"),
        title="Launch",
        body="Body",
        category=CopyType.TWEET,
        audience="",
        labels=frozenset({"x"}),
        status=CopyStatus.APPROVED,
    )
    draft = CopyDraft.from_record(record)

    assert draft.id == "a"
    assert draft.fields() == record.fields()


def test_fields_normalized_accepts_raw_strings() -> None:
    fields = CopyFields.normalized(
        title=None,
        body="text",
        category="cold_email",
        audience=None,
        use_case=None,
        notes=None,
        labels=None,
        status="review",
    )

    assert fields.title == ""
    assert fields.category is CopyType.COLD_EMAIL
    assert fields.status is CopyStatus.REVIEW
    assert fields.labels == frozenset()


def test_as_patch_contains_every_writable_field() -> None:
    patch = CopyFields(title="T", body="B").as_patch()

    assert set(patch) == {
        "title",
        "body",
        "category",
        "audience",
        "use_case",
        "notes",
        "labels",
        "status",
    }
    assert patch["category"] is CopyType.OTHER


def test_normalize_labels_handles_none() -> None:
    assert normalize_labels(None) == frozenset()
