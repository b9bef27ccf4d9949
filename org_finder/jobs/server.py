"""HTTP entrypoint serving organization searches to the browser front end."""

from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, Response, jsonify, request

from org_finder.core.config import get_settings
from org_finder.core.errors import LocationNotFoundError, UpstreamServiceError
from org_finder.core.session import SORTABLE_COLUMNS, SearchSession
from org_finder.etl.export import csv_filename, to_csv
from org_finder.jobs.search import run_search

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App & session ----------
app = Flask(__name__)
app.config["SEARCH_SESSION"] = SearchSession()


def _session() -> SearchSession:
    return app.config["SEARCH_SESSION"]


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "discovery_strategy": settings.discovery_strategy,
                "require_contact": settings.require_contact,
            }
        ),
        200,
    )


@app.post("/search")
def search() -> Any:
    """
    Run a search.
    Required JSON fields: location
    Optional: radius_km (int, positive)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    location = str(payload.get("location") or "").strip()
    if not location:
        return jsonify({"error": "Please enter a location to search."}), 400

    radius_raw = payload.get("radius_km")
    radius_km = None
    if radius_raw is not None:
        try:
            radius_km = int(radius_raw)
        except (TypeError, ValueError):
            return jsonify({"error": "radius_km must be numeric"}), 400
        if radius_km <= 0:
            return jsonify({"error": "radius_km must be positive"}), 400

    try:
        result = run_search(location, radius_km=radius_km, session=_session())
    except LocationNotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    except UpstreamServiceError as exc:
        logger.warning("Search for %s failed upstream: %s", location, exc)
        return jsonify({"error": str(exc)}), 502

    if not result.organizations:
        message = (
            "No arts or cultural organizations with contact information found in this area. "
            "Try expanding your search radius or a different location."
        )
        return jsonify({"data": result.to_dict(), "message": message}), 200

    return jsonify({"data": result.to_dict()}), 200


@app.get("/results")
def results() -> Any:
    """Return the current results, toggling the sort when ?sort=<column> is given."""
    session = _session()
    column = request.args.get("sort")
    if column:
        if column not in SORTABLE_COLUMNS:
            return jsonify({"error": f"unknown sort column: {column}"}), 400
        records = session.sort(column)
    else:
        records = list(session.results)

    return (
        jsonify(
            {
                "data": {
                    "location": session.location,
                    "sort": {"column": session.sort_state.column, "direction": session.sort_state.direction},
                    "organizations": [record.to_dict() for record in records],
                }
            }
        ),
        200,
    )


@app.get("/results.csv")
def download_csv() -> Any:
    session = _session()
    if not session.results:
        return jsonify({"error": "no results to export"}), 404

    filename = csv_filename(session.location)
    return Response(
        to_csv(session.results),
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def main() -> None:
    port = get_settings().port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
