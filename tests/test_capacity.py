from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from racktrack_service.app.crud.production.capacity_crud import (
    build_suggestions, compute_capacity, get_production_analytics, get_production_overview, period_end)
from racktrack_service.app.models.production.activities import Activity
from racktrack_service.app.models.production.job_routes import JobRoute
from racktrack_service.app.models.production.jobs import Job
from racktrack_service.app.models.production.production_issues import ProductionIssue
from racktrack_service.app.models.production.work_centers import WorkCenter

# a Wednesday
NOW = datetime(2030, 1, 2, 8, 0, tzinfo=timezone.utc)


def _wc(id, name, capacity=10, is_active=True):
    return SimpleNamespace(id=id, code=name.upper()[:4], name=name,
                           capacity_per_hour=capacity, is_active=is_active)


def _route(work_center_id, start, hours, status="pending"):
    return SimpleNamespace(work_center_id=work_center_id, status=status,
                           estimated_start=start, estimated_complete=start + timedelta(hours=hours))


def test_week_ends_sunday_night():
    end = period_end("week", NOW)
    assert end == datetime(2030, 1, 6, 23, 59, 59, tzinfo=timezone.utc)
    assert period_end("2weeks", NOW) == NOW + timedelta(days=14)
    assert period_end("month", NOW) == NOW + timedelta(days=30)


def test_compute_capacity_loads_and_bottlenecks():
    centers = [_wc("a", "Press A"), _wc("b", "Press B", capacity=None), _wc("c", "Retired", is_active=False)]
    routes = [
        _route("a", NOW + timedelta(hours=1), 10, status="in_progress"),
        _route("a", NOW + timedelta(days=1), 28),
        _route("a", NOW + timedelta(hours=2), 5, status="completed"),
        _route("a", NOW + timedelta(days=6), 4),
        _route("b", NOW + timedelta(days=3), 2),
        _route("c", NOW + timedelta(days=1), 8),
    ]

    report = compute_capacity(centers, routes, "week", now=NOW)

    assert report["days_in_period"] == 5
    rows = {row["work_center_id"]: row for row in report["work_centers"]}
    assert set(rows) == {"a", "b"}

    press_a = rows["a"]
    assert press_a["available_hours"] == 40
    assert press_a["current_load"] == 10
    assert press_a["planned_load"] == 28
    assert press_a["remaining_hours"] == 2
    assert press_a["utilization"] == 95
    assert press_a["total_capacity"] == 400
    assert rows["b"]["utilization"] == 5
    assert rows["b"]["total_capacity"] == 0

    assert report["average_utilization"] == 50
    assert report["bottlenecks"] == [{
        "work_center_id": "a", "name": "Press A", "utilization": 95,
        "recommendation": "Near capacity - monitor closely",
    }]
    assert len(report["suggestions"]) == 2
    assert report["suggestions"][1].endswith("Review scheduling for Press A.")


def test_daily_load_is_capped_per_day():
    centers = [_wc("a", "Press A")]
    routes = [_route("a", NOW + timedelta(hours=1), 10), _route("a", NOW + timedelta(days=1), 3)]

    daily = compute_capacity(centers, routes, "week", now=NOW)["daily"]

    assert [d["date"] for d in daily] == [date(2030, 1, d) for d in range(2, 7)]
    assert daily[0]["work_centers"][0]["load"] == 8
    assert daily[0]["work_centers"][0]["utilization"] == 100
    assert daily[1]["work_centers"][0]["load"] == 3
    assert daily[2]["work_centers"][0]["load"] == 0


def test_over_capacity_recommendation():
    report = compute_capacity([_wc("a", "Cutter")], [_route("a", NOW + timedelta(hours=1), 50)],
                              "week", now=NOW)
    assert report["bottlenecks"][0]["recommendation"] == "Over capacity - consider rescheduling"
    assert report["work_centers"][0]["remaining_hours"] == 0


def test_suggestions():
    assert build_suggestions([], []) == []
    assert build_suggestions([10, 20], [])[0].startswith("Overall capacity utilization is low")
    assert build_suggestions([90, 95], [])[0].startswith("Capacity is nearly full")


def test_empty_period():
    report = compute_capacity([], [], "month", now=NOW)
    assert report["days_in_period"] == 30
    assert report["average_utilization"] == 0
    assert report["suggestions"] == []


def _finished_route(job, activity, center, target, completed, scrapped, hours):
    started = NOW - timedelta(days=1)
    return JobRoute(job=job, activity_id=activity.id, work_center_id=center.id, status="completed",
                    quantity_target=target, quantity_completed=completed, quantity_scrapped=scrapped,
                    actual_start=started, actual_complete=started + timedelta(hours=hours))


def test_production_analytics_and_overview(db):
    press = WorkCenter(code="PR1", name="Press", type="printing")
    cutter = WorkCenter(code="CT1", name="Cutter", type="cutting")
    activity = Activity(code="PRINT", name="Print", activity_type="production")
    done = Job(job_number="JOB-2030-00001", job_name="Done", status="completed",
               actual_completion_date=NOW)
    running = Job(job_number="JOB-2030-00002", job_name="Running", status="in_progress")
    db.add_all([press, cutter, activity, done, running])
    db.flush()
    db.add_all([
        _finished_route(done, activity, press, 10, 8, 2, hours=2),
        _finished_route(done, activity, press, 10, 10, 0, hours=1),
        JobRoute(job=running, activity_id=activity.id, work_center_id=cutter.id,
                 status="in_progress", quantity_target=5),
        ProductionIssue(issue_number="ISS-00001", issue_type="equipment", severity="critical",
                        title="Jammed feeder"),
    ])
    db.commit()

    analytics = get_production_analytics(db)

    assert len(analytics["work_centers"]) == 1
    row = analytics["work_centers"][0]
    assert row["name"] == "Press"
    assert (row["target"], row["completed"], row["scrapped"]) == (20, 18, 2)
    # completed / target and scrapped / (completed + scrapped)
    assert row["efficiency"] == 90
    assert row["scrap_rate"] == 10
    assert analytics["jobs_completed"] == 1
    assert analytics["issues_by_severity"] == {"critical": 1}
    assert analytics["average_route_hours"] == 1.5

    overview = get_production_overview(db)
    assert overview["jobs_by_status"] == {"completed": 1, "in_progress": 1}
    assert overview["active_routes"] == 1
    assert overview["open_issues"] == 1
    assert overview["pending_bom_approvals"] == 0


def test_analytics_without_finished_work(db):
    analytics = get_production_analytics(db)
    assert analytics["work_centers"] == []
    assert analytics["jobs_completed"] == 0
    assert analytics["average_route_hours"] == 0
