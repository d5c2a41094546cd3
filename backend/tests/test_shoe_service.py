"""
Shoe Store Backend — Shoe Service Unit Tests
===============================================

What:  Tests for ShoeService data access (create, list, get, update, delete).
How:   Uses an AsyncMock collection (no real MongoDB), asserting on the exact
       driver calls and on how their results become schemas or exceptions.

What we test:
    ✅ Create generates a fresh id and does not leak the driver's `_id`
    ✅ List decodes every document; one bad document fails the call
    ✅ Get/update/delete map "no document" to NotFoundError
    ✅ Update is a single find_one_and_update returning the new document
    ✅ Driver errors become DatabaseError with the driver message
"""

import re

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import ConnectionFailure, OperationFailure

from shoestore.exceptions import DatabaseError, NotFoundError
from shoestore.models.shoe import generate_shoe_id
from shoestore.schemas.shoe import ShoeFields
from shoestore.services.shoe_service import ShoeService


class TestGenerateShoeId:
    """Tests for application-level id generation."""

    def test_id_is_32_hex_chars(self):
        assert re.fullmatch(r"[0-9a-f]{32}", generate_shoe_id())

    def test_ids_are_distinct(self):
        ids = {generate_shoe_id() for _ in range(10_000)}
        assert len(ids) == 10_000


class TestShoeServiceCreate:
    """Tests for create_shoe."""

    @pytest.mark.asyncio
    async def test_create_inserts_document_with_generated_id(self, mock_collection, sample_shoe_data):
        result = await ShoeService(mock_collection).create_shoe(ShoeFields(**sample_shoe_data))

        mock_collection.insert_one.assert_awaited_once()
        inserted = mock_collection.insert_one.call_args.args[0]
        assert inserted == {"id": result.id, **sample_shoe_data}
        assert result.name == "Air Zoom"
        assert result.price == 129.99
        assert len(result.id) == 32

    @pytest.mark.asyncio
    async def test_create_result_unaffected_by_driver_object_id(self, mock_collection, sample_shoe_data):
        """insert_one mutates its argument; the returned shoe must not see `_id`."""

        async def add_object_id(document):
            document["_id"] = ObjectId()

        mock_collection.insert_one.side_effect = add_object_id

        result = await ShoeService(mock_collection).create_shoe(ShoeFields(**sample_shoe_data))

        assert "_id" not in result.model_dump()
        assert result.brand == "Nike"

    @pytest.mark.asyncio
    async def test_create_ignores_client_supplied_id(self, mock_collection):
        fields = ShoeFields.model_validate({"id": "client-chosen", "name": "Runner"})

        result = await ShoeService(mock_collection).create_shoe(fields)

        assert result.id != "client-chosen"

    @pytest.mark.asyncio
    async def test_create_driver_error_raises_database_error(self, mock_collection, sample_shoe_data):
        mock_collection.insert_one.side_effect = ConnectionFailure("connection refused")

        with pytest.raises(DatabaseError, match="connection refused"):
            await ShoeService(mock_collection).create_shoe(ShoeFields(**sample_shoe_data))


class TestShoeServiceList:
    """Tests for list_shoes."""

    @pytest.mark.asyncio
    async def test_list_empty_collection(self, mock_collection):
        result = await ShoeService(mock_collection).list_shoes()

        assert result == []
        mock_collection.find.assert_called_once_with({}, {"_id": 0})

    @pytest.mark.asyncio
    async def test_list_decodes_documents(self, mock_collection):
        mock_collection.find.return_value.to_list.return_value = [
            {"id": "a", "name": "One", "brand": "B", "size": 40, "price": 10.0},
            {"id": "b", "name": "Two", "brand": "B", "size": 41, "price": 20.5},
        ]

        result = await ShoeService(mock_collection).list_shoes()

        assert [shoe.id for shoe in result] == ["a", "b"]
        assert result[1].price == 20.5

    @pytest.mark.asyncio
    async def test_list_missing_fields_default_to_zero_values(self, mock_collection):
        mock_collection.find.return_value.to_list.return_value = [{"id": "a"}]

        (shoe,) = await ShoeService(mock_collection).list_shoes()

        assert (shoe.name, shoe.brand, shoe.size, shoe.price) == ("", "", 0, 0.0)

    @pytest.mark.asyncio
    async def test_list_undecodable_document_fails_whole_call(self, mock_collection):
        mock_collection.find.return_value.to_list.return_value = [
            {"id": "a", "name": "Fine", "size": 40},
            {"id": "b", "name": "Broken", "size": "forty"},
        ]

        with pytest.raises(DatabaseError, match="Error decoding shoe"):
            await ShoeService(mock_collection).list_shoes()

    @pytest.mark.asyncio
    async def test_list_driver_error_raises_database_error(self, mock_collection):
        mock_collection.find.return_value.to_list.side_effect = OperationFailure("cursor killed")

        with pytest.raises(DatabaseError, match="cursor killed"):
            await ShoeService(mock_collection).list_shoes()


class TestShoeServiceGet:
    """Tests for get_shoe."""

    @pytest.mark.asyncio
    async def test_get_found(self, mock_collection):
        mock_collection.find_one.return_value = {
            "id": "abc", "name": "Runner", "brand": "Asics", "size": 44, "price": 99.0,
        }

        result = await ShoeService(mock_collection).get_shoe("abc")

        assert result.id == "abc"
        assert result.brand == "Asics"
        mock_collection.find_one.assert_awaited_once_with({"id": "abc"}, {"_id": 0})

    @pytest.mark.asyncio
    async def test_get_not_found(self, mock_collection):
        mock_collection.find_one.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await ShoeService(mock_collection).get_shoe("missing")

        assert exc_info.value.message == "Shoe not found."

    @pytest.mark.asyncio
    async def test_get_driver_error_is_not_not_found(self, mock_collection):
        mock_collection.find_one.side_effect = ConnectionFailure("no servers")

        with pytest.raises(DatabaseError):
            await ShoeService(mock_collection).get_shoe("abc")


class TestShoeServiceUpdate:
    """Tests for update_shoe."""

    @pytest.mark.asyncio
    async def test_update_is_single_atomic_call(self, mock_collection):
        mock_collection.find_one_and_update.return_value = {
            "id": "abc", "name": "New", "brand": "", "size": 0, "price": 0.0,
        }

        result = await ShoeService(mock_collection).update_shoe("abc", ShoeFields(name="New"))

        mock_collection.find_one_and_update.assert_awaited_once_with(
            {"id": "abc"},
            {"$set": {"name": "New", "brand": "", "size": 0, "price": 0.0}},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )
        mock_collection.find_one.assert_not_awaited()
        assert result.name == "New"
        assert result.id == "abc"

    @pytest.mark.asyncio
    async def test_update_not_found(self, mock_collection):
        mock_collection.find_one_and_update.return_value = None

        with pytest.raises(NotFoundError):
            await ShoeService(mock_collection).update_shoe("missing", ShoeFields())

    @pytest.mark.asyncio
    async def test_update_driver_error_message(self, mock_collection):
        mock_collection.find_one_and_update.side_effect = OperationFailure("not primary")

        with pytest.raises(DatabaseError) as exc_info:
            await ShoeService(mock_collection).update_shoe("abc", ShoeFields())

        assert exc_info.value.message.startswith("Error updating shoe: ")
        assert "not primary" in exc_info.value.message


class TestShoeServiceDelete:
    """Tests for delete_shoe."""

    @pytest.mark.asyncio
    async def test_delete_existing(self, mock_collection):
        mock_collection.delete_one.return_value.deleted_count = 1

        await ShoeService(mock_collection).delete_shoe("abc")

        mock_collection.delete_one.assert_awaited_once_with({"id": "abc"})

    @pytest.mark.asyncio
    async def test_delete_nothing_matched(self, mock_collection):
        mock_collection.delete_one.return_value.deleted_count = 0

        with pytest.raises(NotFoundError):
            await ShoeService(mock_collection).delete_shoe("missing")

    @pytest.mark.asyncio
    async def test_delete_driver_error_raises_database_error(self, mock_collection):
        mock_collection.delete_one.side_effect = ConnectionFailure("socket closed")

        with pytest.raises(DatabaseError, match="socket closed"):
            await ShoeService(mock_collection).delete_shoe("abc")
