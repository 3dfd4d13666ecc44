"""Tests for persisted document parsing."""

from binderdex.models.admin import CustomCard, FinishFlags
from binderdex.models.collection import (
    BinderType,
    Collection,
    CollectionConfig,
    EditionFilter,
    MasterSetOptions,
    UserCardMeta,
)
from binderdex.models.documents import (
    collection_to_document,
    custom_card_to_dict,
    parse_collection,
    parse_collections,
    parse_custom_cards,
    parse_slots,
)
from binderdex.models.slot import CardVariant, Slot, SlotCard


def _collection() -> Collection:
    return Collection(
        id="1700000000000-abc1234",
        name="Pikachu",
        type=BinderType.SINGLE_SUBJECT,
        config=CollectionConfig(
            languages=("en", "ja"),
            edition_filter=EditionFilter.UNLIMITED_ONLY,
            subject_dex_id=25,
            subject_name="Pikachu",
            binder_color="yellow",
        ),
        slots=(
            Slot(key="en:sv3-1-normal", card=SlotCard("sv3-1", CardVariant.NORMAL, "en")),
            Slot(key="ja:sv3-1-holo"),
        ),
        user_cards={"user-1-abcdefg": UserCardMeta(name="Promo", set_name="Event")},
        created_at=1700000000000,
        updated_at=1700000000001,
    )


class TestCollectionDocuments:
    def test_document_is_camel_case(self) -> None:
        doc = collection_to_document(_collection())

        assert doc["createdAt"] == 1700000000000
        assert doc["config"]["subjectDexId"] == 25
        assert doc["config"]["editionFilter"] == "unlimitedOnly"
        assert doc["slots"][0] == {
            "key": "en:sv3-1-normal",
            "card": {"cardId": "sv3-1", "variant": "normal", "language": "en"},
        }

    def test_empty_slot_keeps_null_card(self) -> None:
        """An empty slot is stored with an explicit null card."""
        doc = collection_to_document(_collection())

        assert doc["slots"][1] == {"key": "ja:sv3-1-holo", "card": None}

    def test_parses_written_document(self) -> None:
        collection = _collection()

        assert parse_collection(collection_to_document(collection)) == collection

    def test_master_set_options(self) -> None:
        collection = Collection(
            id="c1",
            name="Master",
            type=BinderType.MASTER_SET,
            config=CollectionConfig(
                master_set_options=MasterSetOptions(megas=True, variation_groups=("unown",))
            ),
        )

        doc = collection_to_document(collection)
        parsed = parse_collection(doc)

        assert doc["config"]["masterSetOptions"]["variationGroups"] == ["unown"]
        assert parsed is not None
        assert parsed.config.master_set_options == MasterSetOptions(
            megas=True, variation_groups=("unown",)
        )

    def test_absent_variation_groups_stay_none(self) -> None:
        """Options stored before variation groups existed keep None."""
        raw = {
            "id": "c1",
            "name": "Old master",
            "type": "master-set",
            "config": {"masterSetOptions": {"variations": True}},
        }

        parsed = parse_collection(raw)

        assert parsed is not None
        assert parsed.config.master_set_options is not None
        assert parsed.config.master_set_options.variation_groups is None
        assert parsed.config.master_set_options.variations is True

    def test_lifts_flat_legacy_config(self) -> None:
        """Config fields stored at the top level move into config."""
        raw = {
            "id": "c1",
            "name": "Base",
            "type": "set",
            "setId": "base1",
            "setName": "Base Set",
            "languages": ["en"],
        }

        parsed = parse_collection(raw)

        assert parsed is not None
        assert parsed.config.group_id == "base1"
        assert parsed.config.group_name == "Base Set"
        assert parsed.config.languages == ("en",)

    def test_malformed_collections_dropped(self) -> None:
        """Malformed entries are skipped; the rest load."""
        raw = [
            collection_to_document(_collection()),
            {"id": "x", "name": "No type"},
            {"id": "", "name": "Empty id", "type": "set"},
            "not a dict",
        ]

        parsed = parse_collections(raw)

        assert [c.id for c in parsed] == ["1700000000000-abc1234"]

    def test_not_a_list(self) -> None:
        assert parse_collections({"id": "x"}) == []

    def test_malformed_slots_dropped(self) -> None:
        raw = {
            "id": "c1",
            "name": "Set",
            "type": "set",
            "slots": [
                {"key": "sv3-1-normal", "card": {"cardId": "sv3-1", "variant": "normal"}},
                {"key": "", "card": None},
                {"key": "sv3-2-shiny", "card": {"cardId": "sv3-2", "variant": "shiny"}},
                {"card": None},
            ],
        }

        parsed = parse_collection(raw)

        assert parsed is not None
        assert [s.key for s in parsed.slots] == ["sv3-1-normal"]

    def test_duplicate_slot_keys_keep_first(self) -> None:
        raw = {
            "id": "c1",
            "name": "Set",
            "type": "set",
            "slots": [
                {"key": "a", "card": {"cardId": "sv3-1", "variant": "normal"}},
                {"key": "a", "card": None},
            ],
        }

        parsed = parse_collection(raw)

        assert parsed is not None
        assert len(parsed.slots) == 1
        assert parsed.slots[0].card is not None


class TestSlots:
    def test_parse_slots(self) -> None:
        slots = parse_slots(
            [{"key": "sv3-1-holo", "card": {"cardId": "sv3-1", "variant": "holo"}}, 42]
        )

        assert slots == [Slot(key="sv3-1-holo", card=SlotCard("sv3-1", CardVariant.HOLO))]

    def test_parse_slots_not_a_list(self) -> None:
        assert parse_slots(None) == []


class TestCustomCards:
    def test_custom_card_document(self) -> None:
        card = CustomCard(
            id="c1",
            slot_key="201-unown-new",
            name="Unown New",
            dex_id=201,
            local_id="12",
            group_id="promo",
            group_name="Promo",
            finishes=FinishFlags(normal=True, w_promo=True),
            created_at=5,
        )

        doc = custom_card_to_dict(card)

        assert doc["slotKey"] == "201-unown-new"
        assert doc["image"] is None
        assert doc["variants"]["wPromo"] is True
        assert parse_custom_cards([doc]) == [card]

    def test_legacy_set_fields(self) -> None:
        """Older custom cards call their group a set."""
        raw = {
            "id": "c1",
            "slotKey": "201-x",
            "name": "X",
            "dexId": 201,
            "localId": "1",
            "setId": "promo",
            "setName": "Promo",
        }

        cards = parse_custom_cards([raw, {"id": "broken"}])

        assert len(cards) == 1
        assert cards[0].group_id == "promo"
        assert cards[0].group_name == "Promo"
