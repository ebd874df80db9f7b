from flask import Blueprint, request
from flasgger import swag_from

from ...schemas.candidate import CandidateReadSchema, ResultsSchema
from ...schemas.settings import ToggleSchema
from ...schemas.voter import VoterSchema, VoterTokensImportSchema
from ...services import candidate_tally, maintenance, settings_store, voter_registry
from ...utils.rbac import admin_required
from ...utils.validation import load_or_abort

admin_bp = Blueprint("admin", __name__)

candidate_read_schema = CandidateReadSchema()
candidate_read_many_schema = CandidateReadSchema(many=True)
results_schema = ResultsSchema()
toggle_schema = ToggleSchema()
voter_many_schema = VoterSchema(many=True)
tokens_import_schema = VoterTokensImportSchema()

_CANDIDATE_FORM = [
    {"in": "formData", "name": "name", "type": "string", "required": True},
    {"in": "formData", "name": "className", "type": "string", "required": True},
    {"in": "formData", "name": "number", "type": "integer", "required": True},
    {"in": "formData", "name": "vision", "type": "string", "required": True},
    {"in": "formData", "name": "mission", "type": "string", "required": True},
    {"in": "formData", "name": "photo", "type": "file", "required": False,
     "description": "PNG or JPG, at most 2MB (required on create)"},
]


# ---- Dashboard ----

@admin_bp.get("/overview")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "Dashboard data: settings, counts, results and tally consistency",
    "responses": {200: {"description": "OK"}, 401: {"description": "Unauthorized"}, 403: {"description": "Forbidden"}},
})
def overview():
    voters = voter_registry.list_voters()
    return {
        "settings": {
            "voting_open": settings_store.get_voting_status(),
            "show_results": settings_store.get_show_results_status(),
            "session_id": settings_store.get_voting_session_id(),
        },
        "voters": {
            "total": len(voters),
            "voted": sum(1 for v in voters if v.has_voted),
        },
        "results": results_schema.dump(candidate_tally.results_summary()),
        "consistency": maintenance.tally_consistency(),
    }, 200


# ---- Candidates ----

@admin_bp.post("/candidates")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "Add a candidate",
    "consumes": ["multipart/form-data"],
    "parameters": _CANDIDATE_FORM,
    "responses": {
        201: {"description": "Created"},
        400: {"description": "Validation error / invalid photo"},
        409: {"description": "Candidate number already in use"},
    },
})
def add_candidate():
    candidate = candidate_tally.add_candidate(request.form, request.files.get("photo"))
    return {"candidate": candidate_read_schema.dump(candidate)}, 201


@admin_bp.put("/candidates/<uuid:candidate_id>")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "Update a candidate (photo optional)",
    "consumes": ["multipart/form-data"],
    "parameters": _CANDIDATE_FORM,
    "responses": {
        200: {"description": "Updated"},
        400: {"description": "Validation error / invalid photo"},
        404: {"description": "Candidate not found"},
        409: {"description": "Candidate number already in use"},
    },
})
def update_candidate(candidate_id):
    candidate = candidate_tally.update_candidate(candidate_id, request.form, request.files.get("photo"))
    return {"candidate": candidate_read_schema.dump(candidate)}, 200


@admin_bp.delete("/candidates/<uuid:candidate_id>")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "Delete a candidate",
    "responses": {200: {"description": "Deleted"}, 404: {"description": "Candidate not found"}},
})
def delete_candidate(candidate_id):
    candidate_tally.delete_candidate(candidate_id)
    return {"success": True, "message": "Candidate deleted"}, 200


# ---- Settings ----

@admin_bp.put("/settings/voting")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "Open or close voting",
    "parameters": [{
        "in": "body", "name": "body", "required": True,
        "schema": {"type": "object", "properties": {"enabled": {"type": "boolean"}}, "required": ["enabled"]},
    }],
    "responses": {200: {"description": "OK"}, 400: {"description": "Validation error"}},
})
def set_voting_status():
    payload = load_or_abort(toggle_schema)
    new_state = settings_store.set_voting_status(payload["enabled"])
    return {"success": True, "new_state": new_state}, 200


@admin_bp.put("/settings/results")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "Show or hide public results",
    "parameters": [{
        "in": "body", "name": "body", "required": True,
        "schema": {"type": "object", "properties": {"enabled": {"type": "boolean"}}, "required": ["enabled"]},
    }],
    "responses": {200: {"description": "OK"}, 400: {"description": "Validation error"}},
})
def set_show_results_status():
    payload = load_or_abort(toggle_schema)
    new_state = settings_store.set_show_results_status(payload["enabled"])
    return {"success": True, "new_state": new_state}, 200


# ---- Voters ----

@admin_bp.get("/voters")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "List registered voters and their vote state",
    "responses": {200: {"description": "OK"}},
})
def list_voters():
    voters = voter_registry.list_voters()
    return {"total": len(voters), "voters": voter_many_schema.dump(voters)}, 200


@admin_bp.post("/voters")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "Import voter tokens (one per line); existing tokens are skipped",
    "parameters": [{
        "in": "body", "name": "body", "required": True,
        "schema": {
            "type": "object",
            "properties": {"tokens": {"type": "string", "example": "NISN12345\nNISN67890"}},
            "required": ["tokens"],
        },
    }],
    "responses": {200: {"description": "Imported"}, 400: {"description": "Validation error"}},
})
def add_voter_tokens():
    payload = load_or_abort(tokens_import_schema)
    added, duplicates = voter_registry.register_batch(voter_registry.parse_tokens(payload["tokens"]))
    return {"success": True, "added": added, "duplicates": duplicates}, 200


# ---- Maintenance ----

@admin_bp.post("/reset/votes")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "Zero all tallies, clear voter flags and rotate the voting session",
    "responses": {200: {"description": "Reset"}},
})
def reset_all_votes():
    return {"success": True, **maintenance.reset_all_votes()}, 200


@admin_bp.post("/reset/data")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "Delete ALL candidates, voters and settings",
    "responses": {200: {"description": "Wiped"}},
})
def reset_all_data():
    return {"success": True, **maintenance.reset_all_data()}, 200


@admin_bp.post("/reconcile")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "Recompute candidate tallies from voter records",
    "responses": {200: {"description": "Reconciled"}},
})
def reconcile():
    changed = maintenance.reconcile_tallies()
    return {
        "success": True,
        "corrected": [
            {"candidate_id": str(cid), "old_votes": old, "new_votes": new}
            for cid, (old, new) in changed.items()
        ],
        "consistency": maintenance.tally_consistency(),
    }, 200
