from __future__ import annotations

from datetime import date
from functools import wraps

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..common.datetime_utils import now_local, parse_iso_date
from ..core.enums import DragState, Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    ScheduleFetchError,
    ScheduleUpdateError,
    StaleRecordError,
    ValidationError,
)
from ..container import Container
from .drag import DragSession
from .service import history_to_ui, week_view_to_ui

_ERROR_STATUS = {
    ValidationError: 400,
    AuthorizationError: 403,
    StaleRecordError: 404,
    ScheduleFetchError: 502,
    ScheduleUpdateError: 502,
}


def _status_for(error: DomainError) -> int:
    for cls, status in _ERROR_STATUS.items():
        if isinstance(error, cls):
            return status
    return 400


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                if request.is_json or request.path.startswith("/api/"):
                    return jsonify({"error": "Login required"}), 401
                flash("Please log in to continue.", "warning")
                return redirect(app.config.get("LOGIN_URL", "/"))
            return view(*args, **kwargs)

        return wrapper

    def _current_role() -> Role:
        try:
            return Role(session.get("role"))
        except ValueError:
            return Role.USER

    def _parse_day(value: str | None) -> date:
        if not value:
            return now_local().date()
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError("Invalid date (YYYY-MM-DD)")

    def _viewed_user(service, requested: str | None) -> tuple[str, str]:
        """Resolve (user_id, user_name) of the week to load, owner-or-admin only."""
        user_id = str(requested or session["user_id"])
        service.ensure_can_view(
            current_role=_current_role(),
            current_user_id=str(session["user_id"]),
            user_id=user_id,
        )
        user_name = (session.get("name") or "") if user_id == str(session["user_id"]) else ""
        return user_id, user_name

    def _load_view(service):
        day = _parse_day(request.args.get("date"))
        user_id, user_name = _viewed_user(service, request.args.get("user_id"))
        return service.load_week(user_id=user_id, user_name=user_name, day=day)

    @app.route("/schedules/weekly", methods=["GET"], endpoint="weekly_schedule")
    @login_required
    def weekly_schedule():
        service = container.weekly_schedule_service()
        view = None
        try:
            view = week_view_to_ui(_load_view(service))
        except AuthorizationError:
            current_user = {"full_name": session.get("name"), "role": session.get("role")}
            return render_template("403.html", current_user=current_user), 403
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("weekly schedule failed")
            flash("System error while loading the schedule", "danger")

        return render_template("schedules/weekly.html", view=view, active_page="weekly_schedule")

    @app.route("/api/schedules/weekly", methods=["GET"], endpoint="api_weekly_schedule")
    @login_required
    def api_weekly_schedule():
        service = container.weekly_schedule_service()
        try:
            return jsonify(week_view_to_ui(_load_view(service)))
        except DomainError as e:
            return jsonify({"error": str(e)}), _status_for(e)

    @app.route("/schedules/<item_id>/move", methods=["POST"], endpoint="move_schedule")
    @login_required
    def move_schedule(item_id: str):
        payload = request.get_json(silent=True) if request.is_json else request.form
        payload = payload or {}
        week_s = payload.get("week") or request.args.get("date")
        owner_s = payload.get("user_id") or request.args.get("user_id")

        service = container.weekly_schedule_service()
        drag = DragSession(
            service,
            actor_name=session.get("name") or "",
            actor_user_id=str(session["user_id"]),
            actor_role=_current_role(),
        )

        try:
            week_day = _parse_day(week_s)
            target_s = payload.get("target_day")
            target_day = _parse_day(target_s) if target_s else None

            owner_id, owner_name = _viewed_user(service, owner_s)
            service.load_week(user_id=owner_id, user_name=owner_name, day=week_day)
            started = drag.start(item_id, from_protected=bool(payload.get("from_protected")))
            updated = drag.drop(target_day) if started else None
            error = drag.last_error if drag.state == DragState.FAILED else None
        except DomainError as e:
            error = e
            started = False
            updated = None
        except Exception:
            app.logger.exception("move of %s failed", item_id)
            error = ScheduleUpdateError("System error while moving the schedule")
            started = False
            updated = None

        if request.is_json:
            if error is not None:
                return jsonify({"error": str(error)}), _status_for(error)
            if updated is None:
                return jsonify({"status": "ignored"})
            return jsonify(
                {
                    "status": "moved",
                    "item_id": updated.item_id,
                    "start": updated.start_date.isoformat(),
                    "end": updated.end_date.isoformat(),
                    "history_length": len(updated.history),
                }
            )

        if error is not None:
            flash(str(error), "danger")
        elif updated is not None:
            flash("Schedule moved.", "success")
        elif not started:
            flash("This item cannot be moved.", "warning")
        return redirect(url_for("weekly_schedule", date=week_s or "", user_id=owner_s or None))

    @app.route("/api/schedules/<item_id>/history", methods=["GET"], endpoint="schedule_history")
    @login_required
    def schedule_history(item_id: str):
        service = container.weekly_schedule_service()
        try:
            return jsonify({"item_id": item_id, "history": history_to_ui(
                service.history_for(
                    item_id=item_id,
                    current_role=_current_role(),
                    current_user_id=str(session["user_id"]),
                )
            )})
        except DomainError as e:
            return jsonify({"error": str(e)}), _status_for(e)
