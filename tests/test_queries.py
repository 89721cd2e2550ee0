"""Tests for the read-side projections and the CSV log export."""
from datetime import timedelta

import pytest

from dashboard.models.audit import SystemLogAction, SystemLogEntry
from dashboard.models.enums import DocumentKind, LogDateRange, TaskStatus
from dashboard.services import queries
from dashboard.services.log_export import CSV_HEADER, export_filename, export_logs_csv


class TestTaskQueries:

    def test_user_tasks_are_assigned_or_created(self, seeded_store):
        mine = queries.filter_tasks(seeded_store.tasks, user_id="2")
        # Task 1 is assigned to the worker, task 2 was created by them
        assert [t.id for t in mine] == ["1", "2"]

    def test_filter_by_status_and_search(self, seeded_store):
        assert [t.id for t in queries.filter_tasks(seeded_store.tasks, status=TaskStatus.COMPLETED)] == ["3"]
        assert [t.id for t in queries.filter_tasks(seeded_store.tasks, search="SECURITY")] == ["2"]
        assert queries.filter_tasks(seeded_store.tasks, search="no such words") == []

    def test_status_counts(self, seeded_store):
        assert queries.task_status_counts(seeded_store.tasks) == {
            "total": 3, "pending": 1, "in_progress": 1, "completed": 1,
        }

    def test_overdue_excludes_completed(self, seeded_store, clock):
        overdue = [t.id for t in seeded_store.tasks if queries.is_overdue(t, clock())]
        # Task 3 is past due but completed
        assert overdue == []

        clock.advance(days=3)
        assert [t.id for t in seeded_store.tasks if queries.is_overdue(t, clock())] == ["1", "2"]

    @pytest.mark.parametrize("current,following", [
        (TaskStatus.PENDING, TaskStatus.IN_PROGRESS),
        (TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED),
        (TaskStatus.COMPLETED, TaskStatus.PENDING),
    ])
    def test_status_toggle_cycles(self, current, following):
        assert queries.next_status(current) == following


class TestDocumentQueries:

    @pytest.mark.parametrize("mime,kind", [
        ("application/pdf", DocumentKind.PDF),
        ("application/msword", DocumentKind.DOC),
        ("application/vnd.openxmlformats-officedocument.wordprocessingml.document", DocumentKind.DOC),
        ("image/png", DocumentKind.IMAGE),
        ("text/plain", DocumentKind.OTHER),
    ])
    def test_classify(self, mime, kind):
        assert queries.classify_document(mime) == kind

    def test_filter_by_kind_and_search(self, seeded_store):
        docs = seeded_store.documents

        assert [d.id for d in queries.filter_documents(docs, kind=DocumentKind.PDF)] == ["1"]
        assert [d.id for d in queries.filter_documents(docs, search="architecture")] == ["2"]
        assert len(queries.filter_documents(docs)) == 2

    def test_document_stats(self, seeded_store, clock):
        stats = queries.document_stats(seeded_store.documents, "1", clock())

        assert stats["total"] == 2
        assert stats["mine"] == 1
        assert stats["total_size"] == 2048576 + 1024768
        # Document 1 was uploaded exactly a week ago
        assert stats["recent_uploads"] == 2

    @pytest.mark.parametrize("size,text", [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1048576, "1 MB"),
        (2048576, "1.95 MB"),
        (1073741824, "1 GB"),
    ])
    def test_format_file_size(self, size, text):
        assert queries.format_file_size(size) == text


class TestCalendarQueries:

    def test_upcoming_sorted_and_limited(self, store, clock):
        for days in (9, 1, 7, 3, 5, 2, 4):
            store.create_event(title=f"+{days}", date=clock() + timedelta(days=days))
        store.create_event(title="past", date=clock() - timedelta(days=1))

        upcoming = queries.upcoming_events(store.events, clock())

        assert [e.title for e in upcoming] == ["+1", "+2", "+3", "+4", "+5"]

    def test_events_on_day(self, seeded_store, clock):
        day = (clock() + timedelta(days=2)).date()
        assert [e.title for e in queries.events_on(seeded_store.events, day)] == ["Team Meeting"]

    def test_user_events(self, seeded_store):
        assert len(queries.user_events(seeded_store.events, "2")) == 1
        assert len(queries.user_events(seeded_store.events, "3")) == 2
        assert queries.user_events(seeded_store.events, "4") == []


class TestNotificationQueries:

    def test_notifications_for_recipient(self, seeded_store):
        assert [n.id for n in queries.notifications_for(seeded_store.notifications, "1")] == ["2"]

    def test_type_counts_cover_every_type(self, seeded_store):
        assert queries.notification_type_counts(seeded_store.notifications) == {
            "info": 1, "success": 1, "warning": 1, "error": 0,
        }


class TestAnalytics:

    def test_worker_analytics(self, seeded_store):
        report = queries.analytics(
            seeded_store.get_stats(),
            seeded_store.tasks,
            seeded_store.events,
            seeded_store.documents,
            "2",
        )

        assert report["task_status"] == {"pending": 1, "in_progress": 1, "completed": 1}
        assert report["priority"] == {"low": 0, "medium": 1, "high": 2}
        assert report["my_tasks"] == 2
        assert report["my_completed_tasks"] == 0
        assert report["completion_rate"] == 0
        assert report["my_events"] == 1
        assert report["my_documents"] == 1

    def test_completion_rate_rounds(self, seeded_store):
        report = queries.analytics(
            seeded_store.get_stats(), seeded_store.tasks, seeded_store.events, seeded_store.documents, "3",
        )
        assert report["completion_rate"] == 100

    def test_no_tasks_means_zero_rate(self, seeded_store):
        report = queries.analytics(
            seeded_store.get_stats(), seeded_store.tasks, seeded_store.events, seeded_store.documents, "404",
        )
        assert report["completion_rate"] == 0


class TestLogQueries:

    def entry(self, clock, action, details="", user_id="1", user_name="Admin User", **ago):
        return SystemLogEntry(
            id=action + details,
            action=action,
            user_id=user_id,
            user_name=user_name,
            timestamp=clock() - timedelta(**ago),
            details=details,
        )

    def test_search_spans_action_details_and_user(self, seeded_store, clock):
        logs = seeded_store.system_logs

        assert len(queries.filter_logs(logs, clock(), search="login")) == 1
        assert len(queries.filter_logs(logs, clock(), search="john.doe")) == 1
        assert len(queries.filter_logs(logs, clock(), search="admin user")) == 3

    def test_filter_by_action(self, seeded_store, clock):
        logs = queries.filter_logs(seeded_store.system_logs, clock(), action=SystemLogAction.TASK_CREATED)
        assert [log.id for log in logs] == ["2"]

    def test_date_ranges(self, clock):
        logs = [
            self.entry(clock, "A", hours=1),
            self.entry(clock, "B", days=3),
            self.entry(clock, "C", days=20),
            self.entry(clock, "D", days=90),
        ]

        def actions(date_range):
            return [log.action for log in queries.filter_logs(logs, clock(), date_range=date_range)]

        assert actions(LogDateRange.TODAY) == ["A"]
        assert actions(LogDateRange.WEEK) == ["A", "B"]
        assert actions(LogDateRange.MONTH) == ["A", "B", "C"]
        assert actions(LogDateRange.ALL) == ["A", "B", "C", "D"]

    def test_unique_actions_keep_first_seen_order(self, clock):
        logs = [self.entry(clock, a, details=str(i)) for i, a in enumerate(["X", "Y", "X", "Z"])]
        assert queries.unique_actions(logs) == ["X", "Y", "Z"]

    def test_log_stats(self, clock):
        logs = [
            self.entry(clock, "A", user_id="1", hours=1),
            self.entry(clock, "B", user_id="2", days=2),
            self.entry(clock, "C", user_id="1", days=40),
        ]

        assert queries.log_stats(logs, clock()) == {
            "total": 3, "today": 1, "this_week": 2, "unique_users": 2,
        }


class TestLogExport:

    def test_header_and_rows_in_given_order(self, seeded_store):
        lines = export_logs_csv(seeded_store.system_logs).splitlines()

        assert lines[0] == ",".join(CSV_HEADER)
        assert lines[1] == "2026-10-19 12:00:00,User Login,Admin User,Successful login from IP 192.168.1.100"
        assert len(lines) == 4

    def test_commas_in_details_become_semicolons(self, store):
        store.add_system_log("Note", "1", "Admin", "one, two, three")

        row = export_logs_csv(store.system_logs).splitlines()[1]

        assert row.endswith("one; two; three")
        assert row.count(",") == 3

    def test_empty_export_is_header_only(self):
        assert export_logs_csv([]) == "Timestamp,Action,User,Details\n"

    def test_filename_carries_the_date(self, clock):
        assert export_filename(clock()) == "system-logs-2026-10-19.csv"
