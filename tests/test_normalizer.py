"""Tests for folding card outcomes into an EquipmentRecord."""

from __future__ import annotations

import pytest

from equipment_intel.data import (
    DEFAULT_EQUIPMENT_TYPE,
    UNKNOWN,
    CardOutcome,
    CardPreview,
    DerivationStatus,
    DetailExtraction,
    ModalState,
    TabContent,
)
from equipment_intel.normalize import RecordNormalizer, fold_specifications


def outcome(
    index: int = 0,
    *,
    title: str = "",
    category: str = "",
    preview_text: str = "",
    image: str = "",
    extraction: DetailExtraction | None = None,
) -> CardOutcome:
    return CardOutcome(
        index=index,
        preview=CardPreview(title=title, category=category, preview_text=preview_text, preview_image_url=image),
        final_state=ModalState.CLOSED_VERIFIED,
        extraction=extraction,
    )


SYSTEM = TabContent(
    tab_label="System",
    free_text="Range\n500 km\nSpeed\nMach 3",
    key_value_rows=(("Range", "500 km"), ("Speed", "Mach 3")),
)
WARHEAD = TabContent(tab_label="Warhead", tables=((("Warhead", "300 kg"),),))
BRAHMOS = DetailExtraction(
    title="BrahMos",
    hero_image_url="https://odin.example/img/brahmos.jpg",
    notes="Operated by India and Russia. Variants: BrahMos-A air-launched.",
    tabs={"System": SYSTEM, "Warhead": WARHEAD},
)


@pytest.fixture
def normalizer() -> RecordNormalizer:
    return RecordNormalizer()


class TestFoldSpecifications:
    def test_rows_and_tables_from_every_tab(self) -> None:
        assert fold_specifications([BRAHMOS]) == {
            "Range": "500 km",
            "Speed": "Mach 3",
            "Warhead": "300 kg",
        }

    def test_fold_is_idempotent(self) -> None:
        assert fold_specifications([BRAHMOS, BRAHMOS]) == fold_specifications([BRAHMOS])

    def test_later_row_wins_and_keys_trimmed(self) -> None:
        tab = TabContent(
            tab_label="Specs",
            key_value_rows=((" Range ", " 290 km "), ("Range", "450 km"), ("  ", "orphan")),
            tables=((("Crew",), ("Length", "8.4 m", "approx")),),
        )
        specs = fold_specifications([DetailExtraction(tabs={"Specs": tab})])
        assert specs == {"Range": "450 km", "Length": "8.4 m"}
        assert all(key for key in specs)

    def test_nothing_to_fold(self) -> None:
        assert fold_specifications([]) == {}


class TestDerivations:
    def test_variants(self, normalizer: RecordNormalizer) -> None:
        text = "Variants: BrahMos-A air-launched.\nVersion: BrahMos-NG\nvariant: brahmos-a air-launched"
        assert normalizer.derive_variants(text) == ["BrahMos-A air-launched", "BrahMos-NG"]

    def test_variant_clause_bounds(self, normalizer: RecordNormalizer) -> None:
        assert normalizer.derive_variants("Type: A1") == []
        assert normalizer.derive_variants("Model: " + "x" * 120) == []

    def test_variant_word_must_start_a_word(self, normalizer: RecordNormalizer) -> None:
        assert normalizer.derive_variants("The prototype entered trials") == []

    def test_operators_whole_words_in_order(self, normalizer: RecordNormalizer) -> None:
        text = "Exported to Russia and India; a Russian crew trained in France."
        assert normalizer.derive_operators(text) == ["Russia", "India", "France"]

    def test_operators_case_sensitive(self, normalizer: RecordNormalizer) -> None:
        assert normalizer.derive_operators("used by india") == []
        assert normalizer.derive_operators("the bus stopped") == []


class TestNormalize:
    def test_primary_card_record(self, normalizer: RecordNormalizer) -> None:
        record = normalizer.normalize(
            "brahmos",
            [outcome(title="BrahMos", category="Cruise Missile", image="/img/card.jpg", extraction=BRAHMOS)],
        )

        assert record.name == "BrahMos"
        assert record.type == "Cruise Missile"
        assert record.specifications == {"Range": "500 km", "Speed": "Mach 3", "Warhead": "300 kg"}
        assert record.operators == ("India", "Russia")
        assert record.operators_status is DerivationStatus.FOUND
        assert record.variants == ("BrahMos-A air-launched",)
        assert record.images == ("https://odin.example/img/brahmos.jpg", "/img/card.jpg")
        assert record.notes == BRAHMOS.notes
        assert record.description.startswith(BRAHMOS.notes)
        assert "### System\nRange\n500 km" in record.description

    def test_sentinel_when_nothing_derived(self, normalizer: RecordNormalizer) -> None:
        extraction = DetailExtraction(title="Mystery", notes="No further details.")
        record = normalizer.normalize("mystery", [outcome(extraction=extraction)])

        assert record.variants == (UNKNOWN,)
        assert record.operators == (UNKNOWN,)
        assert record.variants_status is DerivationStatus.NONE_FOUND
        assert record.type == DEFAULT_EQUIPMENT_TYPE

    def test_first_successful_card_is_primary(self, normalizer: RecordNormalizer) -> None:
        other = DetailExtraction(title="BrahMos-NG", tabs={"S": TabContent("S", key_value_rows=(("Weight", "1.5 t"),))})
        record = normalizer.normalize(
            "brahmos",
            [
                outcome(0, title="Broken", extraction=DetailExtraction()),
                outcome(1, title="BrahMos", extraction=BRAHMOS),
                outcome(2, title="BrahMos-NG", extraction=other),
            ],
        )
        assert record.name == "BrahMos"
        assert "Weight" not in record.specifications

    def test_merge_all_cards(self) -> None:
        other = DetailExtraction(
            title="BrahMos-NG",
            tabs={"S": TabContent("S", key_value_rows=(("Weight", "1.5 t"), ("Range", "290 km")))},
        )
        record = RecordNormalizer(merge_all_cards=True).normalize(
            "brahmos", [outcome(0, extraction=BRAHMOS), outcome(1, extraction=other)]
        )
        assert record.name == "BrahMos"
        assert record.specifications["Weight"] == "1.5 t"
        assert record.specifications["Range"] == "290 km"

    def test_icon_images_filtered_and_deduplicated(self, normalizer: RecordNormalizer) -> None:
        extraction = DetailExtraction(title="T-90", hero_image_url="https://odin.example/t90.jpg")
        record = normalizer.normalize(
            "t-90",
            [
                outcome(0, image="https://odin.example/t90.jpg", extraction=extraction),
                outcome(1, image="https://odin.example/assets/Logo.png"),
                outcome(2, image="https://odin.example/favicon.ico"),
                outcome(3, image="https://odin.example/t90-side.jpg"),
            ],
        )
        assert record.images == ("https://odin.example/t90.jpg", "https://odin.example/t90-side.jpg")

    def test_name_falls_back_to_preview_then_query(self, normalizer: RecordNormalizer) -> None:
        untitled = DetailExtraction(notes="Main battle tank.")
        assert normalizer.normalize("t-90", [outcome(title="T-90", extraction=untitled)]).name == "T-90"
        assert normalizer.normalize(" t-90 ", [outcome(extraction=untitled)]).name == "t-90"

    def test_no_successful_card_uses_previews(self, normalizer: RecordNormalizer) -> None:
        record = normalizer.normalize(
            "t-90",
            [outcome(title="T-90", category="Tank", preview_text="Russian MBT", image="/t90.jpg")],
        )
        assert record.name == "T-90"
        assert record.type == "Tank"
        assert record.description == "Russian MBT"
        assert record.specifications == {}
        assert record.variants_status is DerivationStatus.NOT_SEARCHED
        assert record.operators == ()

    def test_no_outcomes_falls_back_to_query(self, normalizer: RecordNormalizer) -> None:
        record = normalizer.normalize("  Pantsir-S1 ", [])
        assert record == normalizer.fallback("Pantsir-S1")
        assert record.name == "Pantsir-S1"
        assert record.type == DEFAULT_EQUIPMENT_TYPE
        assert record.specifications == {}
