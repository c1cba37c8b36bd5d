from datetime import date, datetime

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

import services.rent_sweep as rent_sweep
from models import Notification
from models.lease import LeaseStatus
from models.notification import NotificationStatus, NotificationType
from services.rent_sweep import build_reminder_message, check_overdue_rents
from utils.email import EmailDeliveryError
from tests.conftest import make_lease, make_owner, make_payment, make_property, make_tenant

MARCH_10 = datetime(2026, 3, 10, 8, 0)
MARCH = date(2026, 3, 1)


def _reminders(db):
    return db.query(Notification).filter(Notification.type == NotificationType.RENT_REMINDER).all()


def _seed_lease(db, tenant_name="Koffi Yao", property_name="Studio A1", rent="100000"):
    owner = make_owner(db)
    property_obj = make_property(db, owner, name=property_name, rent=rent)
    tenant = make_tenant(db, name=tenant_name)
    return make_lease(db, tenant, property_obj)


def test_fully_paid_lease_gets_no_reminder(db):
    lease = _seed_lease(db)
    make_payment(db, lease, "100000", target_month=MARCH)
    db.commit()

    result = check_overdue_rents(db, now=MARCH_10)

    assert result["success"] is True
    assert result["overdueContracts"] == 0
    assert result["notificationsCreated"] == 0
    assert _reminders(db) == []


def test_no_reminder_before_grace_period(db):
    _seed_lease(db)
    db.commit()

    result = check_overdue_rents(db, now=datetime(2026, 3, 4, 8, 0))

    assert result["overdueContracts"] == 0
    assert result["notificationsCreated"] == 0


def test_partially_paid_lease_gets_one_reminder(db):
    lease = _seed_lease(db)
    make_payment(db, lease, "30000", target_month=MARCH)
    db.commit()

    result = check_overdue_rents(db, now=MARCH_10)

    assert result["message"] == "Checked 1 lease(s)"
    assert result["overdueContracts"] == 1
    assert result["notificationsCreated"] == 1
    assert result["details"] == [{
        "tenantName": "Koffi Yao",
        "propertyName": "Studio A1",
        "amountDue": 100000.0,
        "amountPaid": 30000.0,
        "amountRemaining": 70000.0,
    }]
    reminders = _reminders(db)
    assert len(reminders) == 1
    assert reminders[0].period == "2026-03"
    assert reminders[0].status == NotificationStatus.SENT
    assert reminders[0].channel == "app"
    assert "70,000 FCFA" in reminders[0].message


def test_payment_for_another_month_does_not_count(db):
    lease = _seed_lease(db)
    make_payment(db, lease, "100000", target_month=date(2026, 2, 1), paid_date=date(2026, 3, 1))
    db.commit()

    result = check_overdue_rents(db, now=MARCH_10)

    assert result["overdueContracts"] == 1
    assert result["notificationsCreated"] == 1


def test_second_run_same_month_creates_nothing(db):
    _seed_lease(db)
    db.commit()

    first = check_overdue_rents(db, now=MARCH_10)
    second = check_overdue_rents(db, now=datetime(2026, 3, 20, 8, 0))

    assert first["notificationsCreated"] == 1
    assert second["notificationsCreated"] == 0
    assert second["overdueContracts"] == 0
    assert second["details"] == []
    assert len(_reminders(db)) == 1


def test_new_month_gets_a_new_reminder(db):
    _seed_lease(db)
    db.commit()

    check_overdue_rents(db, now=MARCH_10)
    april = check_overdue_rents(db, now=datetime(2026, 4, 10, 8, 0))

    assert april["notificationsCreated"] == 1
    assert sorted(n.period for n in _reminders(db)) == ["2026-03", "2026-04"]


def test_ended_leases_are_ignored(db):
    owner = make_owner(db)
    property_obj = make_property(db, owner)
    tenant = make_tenant(db)
    make_lease(db, tenant, property_obj, end=date(2026, 2, 28), status=LeaseStatus.ENDED)
    db.commit()

    result = check_overdue_rents(db, now=MARCH_10)

    assert result["message"] == "Checked 0 lease(s)"
    assert result["notificationsCreated"] == 0


def test_failing_lease_is_skipped(db, monkeypatch):
    broken = _seed_lease(db, tenant_name="Broken", property_name="Shop 1")
    owner = make_owner(db, name="Second owner")
    property_obj = make_property(db, owner, name="Shop 2")
    make_lease(db, make_tenant(db, name="Adjoua"), property_obj)
    db.commit()

    original = rent_sweep.rent_paid_for_month

    def flaky(session, lease_id, month_start):
        if lease_id == broken.id:
            raise SQLAlchemyError("connection lost")
        return original(session, lease_id, month_start)

    monkeypatch.setattr(rent_sweep, "rent_paid_for_month", flaky)

    result = check_overdue_rents(db, now=MARCH_10)

    assert result["success"] is True
    assert result["notificationsCreated"] == 1
    assert [d["tenantName"] for d in result["details"]] == ["Adjoua"]


def test_reminder_recorded_by_concurrent_sweep_is_not_duplicated(db):
    lease = _seed_lease(db)
    # Reminder for March already written by another sweep, stamped just before midnight
    db.add(Notification(
        tenant_id=lease.tenant_id,
        type=NotificationType.RENT_REMINDER,
        message="Reminder",
        channel="app",
        status=NotificationStatus.SENT,
        period="2026-03",
        created_at=datetime(2026, 2, 28, 23, 59),
    ))
    db.commit()

    result = check_overdue_rents(db, now=MARCH_10)

    assert result["overdueContracts"] == 0
    assert result["notificationsCreated"] == 0
    assert len(_reminders(db)) == 1


def test_reminder_message_formats_amounts():
    message = build_reminder_message("Villa 3", 150000, 50000, 100000)

    assert message == (
        "Reminder: the rent of 150,000 FCFA for Villa 3 is overdue. "
        "Amount paid: 50,000 FCFA. Remaining: 100,000 FCFA."
    )


def test_reminder_is_emailed_when_enabled(db, monkeypatch):
    owner = make_owner(db)
    lease = make_lease(db, make_tenant(db, email="koffi@example.com"), make_property(db, owner))
    db.commit()
    sent = []
    monkeypatch.setattr(rent_sweep, "REMINDER_EMAILS_ENABLED", True)
    monkeypatch.setattr(
        rent_sweep, "send_rent_reminder_email",
        lambda to_email, tenant_name, message: sent.append((to_email, tenant_name, message)),
    )

    result = check_overdue_rents(db, now=MARCH_10)

    assert result["notificationsCreated"] == 1
    assert [(to, name) for to, name, _ in sent] == [("koffi@example.com", "Koffi Yao")]
    reminder = _reminders(db)[0]
    assert reminder.tenant_id == lease.tenant_id
    assert reminder.channel == "email"
    assert reminder.status == NotificationStatus.SENT
    assert sent[0][2] == reminder.message


def test_tenant_without_email_is_reminded_in_app(db, monkeypatch):
    _seed_lease(db)
    db.commit()
    sent = []
    monkeypatch.setattr(rent_sweep, "REMINDER_EMAILS_ENABLED", True)
    monkeypatch.setattr(rent_sweep, "send_rent_reminder_email", lambda *args: sent.append(args))

    check_overdue_rents(db, now=MARCH_10)

    assert sent == []
    assert _reminders(db)[0].channel == "app"


def test_failed_email_marks_reminder_failed_and_sweep_continues(db, monkeypatch):
    first_owner = make_owner(db)
    make_lease(db, make_tenant(db, name="Broken", email="broken@example.com"),
               make_property(db, first_owner, name="Shop 1"))
    second_owner = make_owner(db, name="Second owner")
    make_lease(db, make_tenant(db, name="Adjoua", email="adjoua@example.com"),
               make_property(db, second_owner, name="Shop 2"))
    db.commit()
    delivered = []

    def send(to_email, tenant_name, message):
        if tenant_name == "Broken":
            raise EmailDeliveryError("Brevo error: invalid recipient")
        delivered.append(tenant_name)

    monkeypatch.setattr(rent_sweep, "REMINDER_EMAILS_ENABLED", True)
    monkeypatch.setattr(rent_sweep, "send_rent_reminder_email", send)

    result = check_overdue_rents(db, now=MARCH_10)

    assert result["notificationsCreated"] == 2
    assert delivered == ["Adjoua"]
    statuses = {n.tenant.name: n.status for n in _reminders(db)}
    assert statuses == {"Broken": NotificationStatus.FAILED, "Adjoua": NotificationStatus.SENT}


def test_database_error_for_one_lease_does_not_abort_the_sweep(db, monkeypatch):
    broken = _seed_lease(db, tenant_name="Broken", property_name="Shop 1")
    owner = make_owner(db, name="Second owner")
    make_lease(db, make_tenant(db, name="Adjoua"), make_property(db, owner, name="Shop 2"))
    db.commit()

    original = rent_sweep.rent_paid_for_month

    def failing_query(session, lease_id, month_start):
        if lease_id == broken.id:
            session.execute(text("SELECT amount FROM no_such_table"))
        return original(session, lease_id, month_start)

    monkeypatch.setattr(rent_sweep, "rent_paid_for_month", failing_query)

    result = check_overdue_rents(db, now=MARCH_10)

    assert [d["tenantName"] for d in result["details"]] == ["Adjoua"]
    assert [n.tenant.name for n in _reminders(db)] == ["Adjoua"]
