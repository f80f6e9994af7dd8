import pytest
from fastapi import status

from booth_booker.models import Booking

from tests.conf_tests import (
    client,
    clear_db,
    test_db,
    member,
    other_member,
    admin,
    exhibition,
    member_headers,
    admin_headers,
    headers_for,
)


# Fixtures
@pytest.fixture
def test_booking(test_db, member, exhibition): # pylint: disable=redefined-outer-name
    booking = Booking(
        user_id=member.id,
        exhibition_id=exhibition.id,
        booth_type="small",
        amount=2,
    )
    exhibition.small_booth_quota -= 2
    test_db.add(booking)
    test_db.commit()
    test_db.refresh(booking)
    return booking


def booking_payload(exhibition, booth_type="small", amount=1):
    return {"exhibition_id": exhibition.id, "booth_type": booth_type, "amount": amount}


# Tests
# pylint: disable-next=redefined-outer-name
def test_create_booking_success(member_headers, member, exhibition, test_db):
    response = client.post(
        "/bookings/", json=booking_payload(exhibition, "big", 2), headers=member_headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["booth_type"] == "big"
    assert data["amount"] == 2
    assert data["exhibition"]["id"] == exhibition.id
    assert data["exhibition"]["big_booth_quota"] == 3
    assert data["user"] == {"id": member.id, "name": member.name, "email": member.email}

    test_db.refresh(exhibition)
    assert exhibition.big_booth_quota == 3


# pylint: disable-next=redefined-outer-name
def test_create_booking_unauthorized(exhibition):
    response = client.post("/bookings/", json=booking_payload(exhibition))
    assert response.status_code in [
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
    ]


# pylint: disable-next=redefined-outer-name
def test_create_booking_as_admin_forbidden(admin_headers, exhibition):
    response = client.post("/bookings/", json=booking_payload(exhibition), headers=admin_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_create_booking_exhibition_not_found(member_headers):
    response = client.post(
        "/bookings/",
        json={"exhibition_id": 999, "booth_type": "small", "amount": 1},
        headers=member_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert "Exhibition not found" in response.json()["detail"]


# pylint: disable-next=redefined-outer-name
def test_create_booking_invalid_booth_type(member_headers, exhibition):
    response = client.post(
        "/bookings/", json=booking_payload(exhibition, "medium"), headers=member_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Booth type must be either small or big"


# pylint: disable-next=redefined-outer-name
def test_create_booking_malformed_amount(member_headers, exhibition):
    response = client.post(
        "/bookings/", json=booking_payload(exhibition, amount="lots"), headers=member_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.post(
        "/bookings/", json=booking_payload(exhibition, amount=0), headers=member_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# pylint: disable-next=redefined-outer-name
def test_create_booking_insufficient_quota(member_headers, exhibition, test_db):
    response = client.post(
        "/bookings/", json=booking_payload(exhibition, amount=6), headers=member_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "Not enough small booths available" in response.json()["detail"]
    assert test_db.query(Booking).count() == 0


# pylint: disable-next=redefined-outer-name
def test_create_booking_cap(member_headers, exhibition):
    for booth_type, amount in [("small", 3), ("big", 3)]:
        response = client.post(
            "/bookings/", json=booking_payload(exhibition, booth_type, amount), headers=member_headers
        )
        assert response.status_code == status.HTTP_201_CREATED

    response = client.post(
        "/bookings/", json=booking_payload(exhibition, "small", 1), headers=member_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "cannot exceed 6" in response.json()["detail"]


# pylint: disable-next=redefined-outer-name
def test_get_bookings_member_sees_own(member_headers, test_booking, other_member, exhibition, test_db):
    foreign = Booking(user_id=other_member.id, exhibition_id=exhibition.id, booth_type="big", amount=1)
    test_db.add(foreign)
    test_db.commit()

    response = client.get("/bookings/", headers=member_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 1
    assert data[0]["id"] == test_booking.id


# pylint: disable-next=redefined-outer-name
def test_get_bookings_admin_sees_all(admin_headers, test_booking, other_member, exhibition, test_db):
    test_db.add(Booking(user_id=other_member.id, exhibition_id=exhibition.id, booth_type="big", amount=1))
    test_db.commit()

    response = client.get("/bookings/", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()) == 2


# pylint: disable-next=redefined-outer-name
def test_get_booking(member_headers, test_booking):
    response = client.get(f"/bookings/{test_booking.id}", headers=member_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == test_booking.id
    assert data["exhibition"]["small_booth_quota"] == 3


# pylint: disable-next=redefined-outer-name
def test_get_booking_not_found(member_headers):
    response = client.get("/bookings/999", headers=member_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_other_member_forbidden(other_member, test_booking):
    headers = headers_for(other_member)
    assert client.get(f"/bookings/{test_booking.id}", headers=headers).status_code == 403
    assert client.put(
        f"/bookings/{test_booking.id}", json={"amount": 1}, headers=headers
    ).status_code == 403
    assert client.delete(f"/bookings/{test_booking.id}", headers=headers).status_code == 403


# pylint: disable-next=redefined-outer-name
def test_admin_can_manage_any_booking(admin_headers, test_booking, exhibition, test_db):
    assert client.get(f"/bookings/{test_booking.id}", headers=admin_headers).status_code == 200

    response = client.put(
        f"/bookings/{test_booking.id}", json={"booth_type": "big", "amount": 3}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["booth_type"] == "big"

    response = client.delete(f"/bookings/{test_booking.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    test_db.refresh(exhibition)
    assert (exhibition.small_booth_quota, exhibition.big_booth_quota) == (5, 5)


# pylint: disable-next=redefined-outer-name
def test_update_booking(member_headers, test_booking, exhibition, test_db):
    response = client.put(
        f"/bookings/{test_booking.id}", json={"amount": 4}, headers=member_headers
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["amount"] == 4
    assert data["booth_type"] == "small"

    test_db.refresh(exhibition)
    assert exhibition.small_booth_quota == 1


# pylint: disable-next=redefined-outer-name
def test_update_booking_insufficient_quota(member_headers, test_booking, exhibition, test_db):
    response = client.put(
        f"/bookings/{test_booking.id}", json={"booth_type": "big", "amount": 6}, headers=member_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Not enough big booths available"

    test_db.refresh(exhibition)
    assert (exhibition.small_booth_quota, exhibition.big_booth_quota) == (3, 5)


# pylint: disable-next=redefined-outer-name
def test_update_booking_unauthorized(test_booking):
    response = client.put(f"/bookings/{test_booking.id}", json={"amount": 1})
    assert response.status_code in [
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
    ]


# pylint: disable-next=redefined-outer-name
def test_delete_booking(member_headers, test_booking, exhibition, test_db):
    response = client.delete(f"/bookings/{test_booking.id}", headers=member_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert test_db.query(Booking).filter(Booking.id == test_booking.id).first() is None

    test_db.refresh(exhibition)
    assert exhibition.small_booth_quota == 5


# pylint: disable-next=redefined-outer-name
def test_delete_booking_not_found(member_headers):
    response = client.delete("/bookings/999", headers=member_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
