# test_customers.py
import pytest

from homefood.errors import ValidationError, NotFoundError


def test_create_requires_name_and_phone(customers):
    with pytest.raises(ValidationError):
        customers.create("", "9000000001")
    with pytest.raises(ValidationError):
        customers.create("Asha", "  ")


def test_crud_and_search(customers, orders):
    asha = customers.create(" Asha Rani ", "9000000001", "Flat 2")
    ravi = customers.create("ravi", "9888800002")
    assert customers.get(asha.id).name == "Asha Rani"

    assert [c.name for c in customers.search()] == ["Asha Rani", "ravi"]
    assert [c.id for c in customers.search("RANI")] == [asha.id]
    assert [c.id for c in customers.search("98888")] == [ravi.id]

    updated = customers.update(ravi.id, {"name": "Ravi Teja", "address": "Lane 4"})
    assert customers.get(ravi.id) == updated
    with pytest.raises(ValidationError):
        customers.update(ravi.id, {"phone": ""})

    customers.delete(asha.id)
    with pytest.raises(NotFoundError):
        customers.get(asha.id)
    with pytest.raises(NotFoundError):
        customers.delete(asha.id)
