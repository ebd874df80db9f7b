from flask import Blueprint
from flasgger import swag_from

from ...errors import ResultsHidden
from ...schemas.candidate import ResultsSchema
from ...services import candidate_tally, settings_store

results_bp = Blueprint("results", __name__)

results_schema = ResultsSchema()


@results_bp.get("/")
@swag_from({
    "tags": ["Results"],
    "summary": "Leaderboard (only once the admin has published results)",
    "description": "Returns per-candidate vote counts and percentages in ballot order.",
    "responses": {
        200: {"description": "Results"},
        403: {"description": "Results not available yet"},
        503: {"description": "Storage unavailable"},
    }
})
def results():
    if not settings_store.get_show_results_status():
        raise ResultsHidden()

    return results_schema.dump(candidate_tally.results_summary()), 200
