from unittest.mock import MagicMock, call

import pytest
from botocore.exceptions import ClientError

from bulk_upload.domain import CustomerRecord, UnprocessedItemsError
from bulk_upload.infrastructure.adapters import DynamoDbCustomerRepository


def make_customers(count: int) -> list[CustomerRecord]:
    return [
        CustomerRecord(
            customerId=f"C{i}",
            firstName="First",
            lastName="Last",
            phoneNumber=f"555-{i:04d}",
            address=f"{i} Main St",
        )
        for i in range(count)
    ]


def put(record: CustomerRecord) -> dict:
    return {"PutRequest": {"Item": record.to_item()}}


class TestDynamoDbCustomerRepository:
    @pytest.fixture
    def dynamodb(self):
        resource = MagicMock()
        resource.batch_write_item.return_value = {"UnprocessedItems": {}}
        return resource

    @pytest.fixture
    def sleep(self):
        return MagicMock()

    @pytest.fixture
    def repository(self, dynamodb, sleep):
        return DynamoDbCustomerRepository(
            dynamodb,
            table_name="CustomerData",
            max_attempts=3,
            base_delay=0.1,
            sleep=sleep,
        )

    def test_single_batch_put_requests(self, repository, dynamodb, ann, bob):
        written = repository.put_batch([ann, bob])

        assert written == 2
        dynamodb.batch_write_item.assert_called_once_with(
            RequestItems={"CustomerData": [put(ann), put(bob)]}
        )

    def test_item_maps_every_field(self, repository, dynamodb, ann):
        repository.put_batch([ann])

        request_items = dynamodb.batch_write_item.call_args.kwargs["RequestItems"]
        assert request_items["CustomerData"][0]["PutRequest"]["Item"] == {
            "customerId": "C1",
            "firstName": "Ann",
            "lastName": "Lee",
            "phoneNumber": "555-1000",
            "address": "1 Main St",
        }

    def test_chunks_at_25_items(self, repository, dynamodb):
        customers = make_customers(60)

        written = repository.put_batch(customers)

        assert written == 60
        sizes = [
            len(c.kwargs["RequestItems"]["CustomerData"])
            for c in dynamodb.batch_write_item.call_args_list
        ]
        assert sizes == [25, 25, 10]

    def test_chunks_keep_delivery_order(self, repository, dynamodb):
        customers = make_customers(30)

        repository.put_batch(customers)

        sent = [
            request["PutRequest"]["Item"]["customerId"]
            for c in dynamodb.batch_write_item.call_args_list
            for request in c.kwargs["RequestItems"]["CustomerData"]
        ]
        assert sent == [c.customer_id for c in customers]

    def test_custom_batch_size(self, dynamodb, sleep):
        repository = DynamoDbCustomerRepository(dynamodb, batch_size=10, sleep=sleep)

        repository.put_batch(make_customers(21))

        assert dynamodb.batch_write_item.call_count == 3

    def test_custom_table_name(self, dynamodb, ann):
        repository = DynamoDbCustomerRepository(dynamodb, table_name="CustomersStaging")

        repository.put_batch([ann])

        request_items = dynamodb.batch_write_item.call_args.kwargs["RequestItems"]
        assert list(request_items) == ["CustomersStaging"]

    def test_retries_unprocessed_items(self, repository, dynamodb, sleep, ann, bob):
        dynamodb.batch_write_item.side_effect = [
            {"UnprocessedItems": {"CustomerData": [put(bob)]}},
            {"UnprocessedItems": {}},
        ]

        written = repository.put_batch([ann, bob])

        assert written == 2
        assert dynamodb.batch_write_item.call_args_list == [
            call(RequestItems={"CustomerData": [put(ann), put(bob)]}),
            call(RequestItems={"CustomerData": [put(bob)]}),
        ]
        sleep.assert_called_once_with(0.1)

    def test_backoff_doubles(self, repository, dynamodb, sleep, ann):
        dynamodb.batch_write_item.side_effect = [
            {"UnprocessedItems": {"CustomerData": [put(ann)]}},
            {"UnprocessedItems": {"CustomerData": [put(ann)]}},
            {"UnprocessedItems": {}},
        ]

        repository.put_batch([ann])

        assert sleep.call_args_list == [call(0.1), call(0.2)]

    def test_unprocessed_after_all_attempts_raises(self, repository, dynamodb, ann, bob):
        dynamodb.batch_write_item.return_value = {
            "UnprocessedItems": {"CustomerData": [put(bob)]}
        }

        with pytest.raises(UnprocessedItemsError) as exc_info:
            repository.put_batch([ann, bob])

        assert exc_info.value.count == 1
        assert exc_info.value.table_name == "CustomerData"
        assert dynamodb.batch_write_item.call_count == 3

    def test_client_error_propagates(self, repository, dynamodb, ann):
        dynamodb.batch_write_item.side_effect = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "Table not found"}},
            "BatchWriteItem",
        )

        with pytest.raises(ClientError):
            repository.put_batch([ann])

    def test_repeated_customer_id_last_row_wins(self, repository, dynamodb, ann):
        annie = ann.model_copy(update={"first_name": "Annie"})

        written = repository.put_batch([ann, annie])

        assert written == 1
        dynamodb.batch_write_item.assert_called_once_with(
            RequestItems={"CustomerData": [put(annie)]}
        )

    def test_repeated_customer_id_takes_position_of_last_row(
        self, repository, dynamodb, ann, bob
    ):
        annie = ann.model_copy(update={"first_name": "Annie"})

        repository.put_batch([ann, bob, annie])

        dynamodb.batch_write_item.assert_called_once_with(
            RequestItems={"CustomerData": [put(bob), put(annie)]}
        )

    def test_repeated_ids_never_share_a_call(self, repository, dynamodb):
        customers = make_customers(30) + make_customers(30)

        written = repository.put_batch(customers)

        assert written == 30
        for c in dynamodb.batch_write_item.call_args_list:
            ids = [
                request["PutRequest"]["Item"]["customerId"]
                for request in c.kwargs["RequestItems"]["CustomerData"]
            ]
            assert len(ids) == len(set(ids))

    def test_empty_batch_makes_no_call(self, repository, dynamodb):
        assert repository.put_batch([]) == 0
        dynamodb.batch_write_item.assert_not_called()

    @pytest.mark.parametrize("batch_size", [0, 26])
    def test_invalid_batch_size(self, dynamodb, batch_size):
        with pytest.raises(ValueError):
            DynamoDbCustomerRepository(dynamodb, batch_size=batch_size)

    def test_invalid_max_attempts(self, dynamodb):
        with pytest.raises(ValueError):
            DynamoDbCustomerRepository(dynamodb, max_attempts=0)
