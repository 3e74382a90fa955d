"""Tests for the booking submission flow and the appointment endpoints."""
import pytest

from salon.domain.appointments.booking import BookingService
from salon.models import Appointment


@pytest.fixture
def agenda(make_professional, make_service, make_schedule):
    """A professional working Monday 09:00-18:00 and a one hour service."""
    professional = make_professional()
    service = make_service(60, name="Corte feminino")
    make_schedule(professional, day_of_week=1, start="09:00", end="18:00")
    return professional, service


def booking(user, professional, service, start="10:00", date="2025-06-02", **extra):
    payload = {
        "userId": user.id,
        "professionalId": professional.id,
        "serviceId": service.id,
        "date": date,
        "startTime": start,
    }
    payload.update(extra)
    return payload


class TestBooking:
    def test_books_and_computes_end_time(self, client, login_as, customer, agenda):
        professional, service = agenda
        login_as(customer.id)

        response = client.post(
            "/api/appointments", json=booking(customer, professional, service, notes="Primeira vez")
        )

        assert response.status_code == 201
        body = response.json()
        assert body["startTime"] == "10:00"
        assert body["endTime"] == "11:00"
        assert body["status"] == "scheduled"
        assert body["date"] == "2025-06-02"
        assert body["notes"] == "Primeira vez"

    def test_end_time_uses_clock_arithmetic(self, client, login_as, admin, customer, make_professional, make_service, make_schedule):
        """17:45 plus 30 minutes ends at 18:15 (an admin may book off the half-hour grid)."""
        professional = make_professional()
        service = make_service(30)
        make_schedule(professional, start="09:00", end="19:00")
        login_as(admin.id)

        response = client.post("/api/appointments", json=booking(customer, professional, service, start="17:45"))

        assert response.status_code == 201
        assert response.json()["endTime"] == "18:15"

    def test_booking_past_midnight_is_rejected(self, client, login_as, customer, make_professional, make_service, make_schedule, db):
        professional = make_professional()
        service = make_service(30)
        make_schedule(professional, start="18:00", end="23:59")
        login_as(customer.id)

        response = client.post("/api/appointments", json=booking(customer, professional, service, start="23:50"))

        assert response.status_code == 422
        assert response.json()["message"] == "O serviço ultrapassa a meia-noite"
        assert db.query(Appointment).count() == 0

    def test_unknown_service(self, client, login_as, customer, agenda, db):
        professional, _ = agenda
        login_as(customer.id)

        payload = booking(customer, professional, agenda[1])
        payload["serviceId"] = 9999
        response = client.post("/api/appointments", json=payload)

        assert response.status_code == 404
        assert response.json()["message"] == "Serviço não encontrado"
        assert db.query(Appointment).count() == 0

    def test_unknown_professional(self, client, login_as, customer, agenda):
        _, service = agenda
        login_as(customer.id)

        payload = booking(customer, agenda[0], service)
        payload["professionalId"] = 9999
        response = client.post("/api/appointments", json=payload)

        assert response.status_code == 404
        assert response.json()["message"] == "Profissional não encontrado"

    def test_inactive_service_is_rejected(self, client, login_as, customer, agenda, make_service):
        professional, _ = agenda
        retired = make_service(30, name="Escova progressiva", active=False)
        login_as(customer.id)

        response = client.post("/api/appointments", json=booking(customer, professional, retired))
        assert response.status_code == 400

    def test_second_booking_for_same_slot_conflicts(self, client, login_as, customer, make_user, agenda):
        professional, service = agenda
        login_as(customer.id)
        first = client.post("/api/appointments", json=booking(customer, professional, service))
        assert first.status_code == 201

        other = make_user(name="Joana", email="joana@example.com")
        login_as(other.id)
        second = client.post("/api/appointments", json=booking(other, professional, service))

        assert second.status_code == 409
        assert second.json()["message"] == "Horário indisponível"

    def test_overlapping_booking_conflicts(self, client, login_as, customer, agenda):
        professional, service = agenda
        login_as(customer.id)
        assert client.post("/api/appointments", json=booking(customer, professional, service, start="10:00")).status_code == 201

        response = client.post("/api/appointments", json=booking(customer, professional, service, start="10:30"))
        assert response.status_code == 409

    def test_cancelled_slot_can_be_rebooked(self, client, login_as, customer, agenda, make_appointment):
        professional, service = agenda
        make_appointment(customer, professional, service, "10:00", "11:00", status="cancelled")
        login_as(customer.id)

        response = client.post("/api/appointments", json=booking(customer, professional, service))
        assert response.status_code == 201

    @pytest.mark.parametrize("start", ["08:00", "17:30"])
    def test_outside_working_hours(self, client, login_as, customer, agenda, start):
        professional, service = agenda
        login_as(customer.id)

        response = client.post("/api/appointments", json=booking(customer, professional, service, start=start))
        assert response.status_code == 409

    def test_day_without_schedule(self, client, login_as, customer, agenda):
        professional, service = agenda
        login_as(customer.id)

        # 2025-06-03 is a Tuesday
        response = client.post("/api/appointments", json=booking(customer, professional, service, date="2025-06-03"))
        assert response.status_code == 409

    def test_lunch_break_cannot_be_booked(self, client, login_as, customer, make_professional, make_service, make_schedule):
        professional = make_professional()
        service = make_service(60)
        make_schedule(professional, lunch_start_time="12:00", lunch_end_time="13:00")
        login_as(customer.id)

        response = client.post("/api/appointments", json=booking(customer, professional, service, start="11:30"))
        assert response.status_code == 409

    def test_afternoon_shift_is_bookable(self, client, login_as, customer, make_professional, make_service, make_schedule):
        """Monday 09:00-12:00 plus 14:00-18:00: both rows take bookings."""
        professional = make_professional()
        service = make_service(60)
        make_schedule(professional, start="09:00", end="12:00")
        make_schedule(professional, start="14:00", end="18:00")
        login_as(customer.id)

        afternoon = client.post("/api/appointments", json=booking(customer, professional, service, start="15:00"))
        assert afternoon.status_code == 201

        # 11:30-12:30 straddles the gap between the two shifts
        gap = client.post("/api/appointments", json=booking(customer, professional, service, start="11:30"))
        assert gap.status_code == 409

    def test_client_cannot_book_off_grid(self, client, login_as, customer, agenda):
        professional, service = agenda
        login_as(customer.id)

        response = client.post("/api/appointments", json=booking(customer, professional, service, start="09:10"))

        assert response.status_code == 409
        assert response.json()["message"] == "Horário indisponível"

    def test_grid_follows_the_shift_start(self, client, login_as, customer, make_professional, make_service, make_schedule):
        """A shift opening at 14:15 offers 14:15, 14:45, ... and those are bookable."""
        professional = make_professional()
        service = make_service(30)
        make_schedule(professional, start="14:15", end="18:00")
        login_as(customer.id)

        assert client.post("/api/appointments", json=booking(customer, professional, service, start="14:45")).status_code == 201
        assert client.post("/api/appointments", json=booking(customer, professional, service, start="16:00")).status_code == 409

    def test_database_rejects_double_booking_past_the_check(
        self, client, login_as, customer, agenda, make_appointment, monkeypatch, db
    ):
        """With the slot check skipped, the unique index on live slots still refuses the second row."""
        monkeypatch.setattr(BookingService, "ensure_slot_available", lambda self, *args, **kwargs: None)
        professional, service = agenda
        make_appointment(customer, professional, service, "14:00", "15:00", status="cancelled")
        login_as(customer.id)

        first = client.post("/api/appointments", json=booking(customer, professional, service))
        second = client.post("/api/appointments", json=booking(customer, professional, service))
        # A cancelled row at the same start does not hold the slot
        reuse = client.post("/api/appointments", json=booking(customer, professional, service, start="14:00"))

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json() == {"message": "Horário indisponível"}
        assert reuse.status_code == 201
        assert db.query(Appointment).filter(Appointment.status == "scheduled").count() == 2

    def test_missing_fields_report_each_field(self, client, login_as, customer):
        login_as(customer.id)

        response = client.post("/api/appointments", json={"userId": customer.id})

        assert response.status_code == 422
        fields = {error["field"] for error in response.json()["errors"]}
        assert {"professionalId", "serviceId", "date", "startTime"} <= fields

    def test_blank_start_time_is_rejected(self, client, login_as, customer, agenda):
        professional, service = agenda
        login_as(customer.id)

        response = client.post("/api/appointments", json=booking(customer, professional, service, start="  "))
        assert response.status_code == 422

    def test_requires_session(self, client, customer, agenda):
        professional, service = agenda
        response = client.post("/api/appointments", json=booking(customer, professional, service))
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}

    def test_client_cannot_book_for_someone_else(self, client, login_as, customer, make_user, agenda):
        professional, service = agenda
        other = make_user(name="Joana", email="joana@example.com")
        login_as(customer.id)

        response = client.post("/api/appointments", json=booking(other, professional, service))
        assert response.status_code == 403

    def test_admin_books_for_a_client(self, client, login_as, admin, customer, agenda):
        professional, service = agenda
        login_as(admin.id)

        response = client.post("/api/appointments", json=booking(customer, professional, service))
        assert response.status_code == 201
        assert response.json()["userId"] == customer.id

    def test_booked_slot_disappears_from_availability(self, client, login_as, customer, agenda):
        professional, service = agenda
        login_as(customer.id)
        client.post("/api/appointments", json=booking(customer, professional, service, start="10:00"))

        slots = client.get(
            "/api/availability",
            params={"professionalId": professional.id, "serviceId": service.id, "date": "2025-06-02"},
        ).json()["slots"]
        assert "10:00" not in slots
        assert "09:30" not in slots
        assert "11:00" in slots


class TestAppointmentReads:
    def test_public_listing_by_date_hides_client_details(self, client, customer, agenda, make_appointment):
        professional, service = agenda
        make_appointment(customer, professional, service, "10:00", "11:00")

        response = client.get("/api/appointments", params={"date": "2025-06-02"})

        assert response.status_code == 200
        [entry] = response.json()
        assert entry["startTime"] == "10:00"
        assert "userId" not in entry
        assert "notes" not in entry

    def test_listing_without_date_returns_own_appointments(
        self, client, login_as, customer, make_user, agenda, make_appointment
    ):
        professional, service = agenda
        other = make_user(name="Joana", email="joana@example.com")
        mine = make_appointment(customer, professional, service, "10:00", "11:00")
        make_appointment(other, professional, service, "14:00", "15:00")

        assert client.get("/api/appointments").status_code == 401

        login_as(customer.id)
        response = client.get("/api/appointments")
        assert [a["id"] for a in response.json()] == [mine.id]

    def test_client_cannot_read_other_appointment(
        self, client, login_as, customer, make_user, agenda, make_appointment
    ):
        professional, service = agenda
        other = make_user(name="Joana", email="joana@example.com")
        theirs = make_appointment(other, professional, service, "14:00", "15:00")
        login_as(customer.id)

        assert client.get(f"/api/appointments/{theirs.id}").status_code == 403
        assert client.get("/api/appointments/9999").status_code == 404

    def test_professional_agenda_for_admin(self, client, login_as, admin, customer, agenda, make_appointment):
        professional, service = agenda
        make_appointment(customer, professional, service, "10:00", "11:00")
        login_as(admin.id)

        response = client.get(f"/api/professionals/{professional.id}/appointments")
        assert response.status_code == 200
        assert len(response.json()) == 1


class TestAppointmentChanges:
    def test_admin_reschedule_rechecks_conflicts(
        self, client, login_as, admin, customer, agenda, make_appointment
    ):
        professional, service = agenda
        make_appointment(customer, professional, service, "10:00", "11:00")
        movable = make_appointment(customer, professional, service, "14:00", "15:00")
        login_as(admin.id)

        blocked = client.put(f"/api/appointments/{movable.id}", json={"startTime": "10:30"})
        assert blocked.status_code == 409

        moved = client.put(f"/api/appointments/{movable.id}", json={"startTime": "15:00"})
        assert moved.status_code == 200
        assert moved.json()["endTime"] == "16:00"

    def test_moving_within_own_slot_is_allowed(self, client, login_as, admin, customer, agenda, make_appointment):
        professional, service = agenda
        appointment = make_appointment(customer, professional, service, "10:00", "11:00")
        login_as(admin.id)

        response = client.put(f"/api/appointments/{appointment.id}", json={"startTime": "10:30"})
        assert response.status_code == 200
        assert response.json()["startTime"] == "10:30"

    def test_notes_only_edit(self, client, login_as, admin, customer, agenda, make_appointment):
        professional, service = agenda
        appointment = make_appointment(customer, professional, service, "10:00", "11:00")
        login_as(admin.id)

        response = client.put(f"/api/appointments/{appointment.id}", json={"notes": "Trazer referência"})
        assert response.status_code == 200
        assert response.json()["notes"] == "Trazer referência"
        assert response.json()["startTime"] == "10:00"

    def test_client_may_cancel_own_appointment(self, client, login_as, customer, agenda, make_appointment):
        professional, service = agenda
        appointment = make_appointment(customer, professional, service, "10:00", "11:00")
        login_as(customer.id)

        response = client.patch(f"/api/appointments/{appointment.id}/status", json={"status": "cancelled"})
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

        completed = client.patch(f"/api/appointments/{appointment.id}/status", json={"status": "completed"})
        assert completed.status_code == 403

    def test_status_transitions_for_admin(self, client, login_as, admin, customer, agenda, make_appointment):
        professional, service = agenda
        appointment = make_appointment(customer, professional, service, "10:00", "11:00")
        login_as(admin.id)

        assert client.patch(f"/api/appointments/{appointment.id}/status", json={"status": "no-show"}).status_code == 200
        assert client.patch(f"/api/appointments/{appointment.id}/status", json={"status": "cancelled"}).status_code == 400
        assert client.patch(f"/api/appointments/{appointment.id}/status", json={"status": "done"}).status_code == 422

    def test_reopening_cancelled_appointment_needs_free_slot(
        self, client, login_as, admin, customer, agenda, make_appointment
    ):
        professional, service = agenda
        cancelled = make_appointment(customer, professional, service, "10:00", "11:00", status="cancelled")
        make_appointment(customer, professional, service, "10:00", "11:00")
        login_as(admin.id)

        response = client.patch(f"/api/appointments/{cancelled.id}/status", json={"status": "scheduled"})
        assert response.status_code == 409

    def test_delete_is_admin_only(self, client, login_as, admin, customer, agenda, make_appointment):
        professional, service = agenda
        appointment = make_appointment(customer, professional, service, "10:00", "11:00")

        login_as(customer.id)
        assert client.delete(f"/api/appointments/{appointment.id}").status_code == 403

        login_as(admin.id)
        assert client.delete(f"/api/appointments/{appointment.id}").status_code == 204
        assert client.delete(f"/api/appointments/{appointment.id}").status_code == 404
