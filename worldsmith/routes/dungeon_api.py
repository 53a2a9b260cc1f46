"""
project: Worldsmith
module: dungeon_api.py
License: MIT

Dungeon generation API routes.

Thin HTTP layer around the procedural core: validates the request body,
records a generation request with its step log, runs the generator and stores
the resulting document verbatim as a world element. Also exposes the stored
document and the image-enhancement write-back for per-level map images.
"""

from flask import Blueprint, current_app, jsonify, request

from worldsmith import db
from worldsmith.dungeon import (
    DungeonDetail,
    DungeonGenerationError,
    DungeonGenerationParams,
    DungeonGenerator,
    InvalidParametersError,
)
from worldsmith.logging_utils import get_logger
from worldsmith.models import GenerationLog, GenerationRequest, WorldElement
from worldsmith.services.generation_logger import GenerationLogger
from worldsmith.validation import GENERATE_DUNGEON, MAP_IMAGE, validate

bp_dungeon = Blueprint("dungeon_api", __name__)
log = get_logger("worldsmith.api")


def _bad_request(message, **extra):
    body = {"error": message}
    body.update(extra)
    return jsonify(body), 400


def _check_caps(params: DungeonGenerationParams):
    """Size caps the core leaves to its caller."""
    errors = []
    max_cells = current_app.config.get("DUNGEON_MAX_GRID_CELLS", 40000)
    max_levels = current_app.config.get("DUNGEON_MAX_LEVELS", 5)
    if params.grid_width * params.grid_height > max_cells:
        errors.append(f"grid_width * grid_height must not exceed {max_cells}")
    if params.num_levels > max_levels:
        errors.append(f"num_levels must not exceed {max_levels}")
    return errors


def _mark_failed(req_row: GenerationRequest, gen_log: GenerationLogger, exc: Exception):
    req_row.status = "failed"
    gen_log.log("generation", str(exc), log_type="error", data={"error": type(exc).__name__})
    db.session.commit()
    gen_log.flush()
    log.error(event="dungeon_generation_failed", request_id=req_row.id, error=str(exc))


def _totals(dungeon: DungeonDetail):
    return {
        "total_rooms": sum(len(lvl.rooms) for lvl in dungeon.levels),
        "total_corridors": sum(len(lvl.corridors) for lvl in dungeon.levels),
        "total_doors": sum(len(lvl.doors) for lvl in dungeon.levels),
        "num_levels": len(dungeon.levels),
    }


@bp_dungeon.route("/api/generate-dungeon", methods=["POST"])
def generate_dungeon_route():
    """Generate (or accept) a dungeon and store it.

    Body JSON:
      { "world_id": str, "name": str?, "params": {...}?, "seed": int?,
        "preview": bool?, "detail": {...}? }
    - ``detail`` skips generation and stores the supplied document.
    - ``preview`` returns the document without storing it.

    Response: { "dungeon_id", "dungeon", "generation_log": {"request_id"} }
    or { "preview": true, "dungeon", "generation_log" } for previews.
    """
    data = request.get_json(silent=True)
    if data is None:
        return _bad_request("Invalid JSON body")
    ok, body = validate(data, GENERATE_DUNGEON)
    if not ok:
        return _bad_request(body["error"], field=body["field"], code=body["code"])

    try:
        params = DungeonGenerationParams.from_dict(body.get("params")).validate()
    except InvalidParametersError as exc:
        return _bad_request("invalid dungeon parameters", details=exc.errors)
    cap_errors = _check_caps(params)
    if cap_errors:
        return _bad_request("invalid dungeon parameters", details=cap_errors)

    supplied = None
    if "detail" in body:
        try:
            supplied = DungeonDetail.from_dict(body["detail"])
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            return _bad_request("invalid dungeon detail", details=[str(exc)])

    world_id = body["world_id"]
    req_row = GenerationRequest(
        world_id=world_id,
        kind="dungeon",
        prompt={"world_id": world_id, "name": body.get("name"), "params": params.to_dict(), "seed": body.get("seed")},
        model="procedural",
    )
    db.session.add(req_row)
    db.session.commit()
    gen_log = GenerationLogger(req_row.id, world_id)

    try:
        if supplied is None:
            gen_log.start_step("procedural")
            generator = DungeonGenerator(params, seed=body.get("seed"))
            dungeon = generator.run()
            gen_log.log("procedural", "procedural generation complete",
                        data=dict(_totals(dungeon), seed=generator.seed, metrics=generator.metrics or None))
            gen_log.end_step("procedural")
        else:
            dungeon = supplied
            gen_log.log("procedural", "using supplied dungeon detail", data=_totals(dungeon))
    except DungeonGenerationError as exc:
        _mark_failed(req_row, gen_log, exc)
        return jsonify({"error": str(exc), "generation_log": {"request_id": req_row.id}}), 500
    except Exception as exc:
        # recorded here, answered by the app 500 handler
        db.session.rollback()
        _mark_failed(req_row, gen_log, exc)
        raise

    if body.get("name"):
        dungeon.name = body["name"]
    document = dungeon.to_dict()

    if body.get("preview"):
        req_row.status = "completed"
        db.session.commit()
        gen_log.flush()
        return jsonify({"preview": True, "dungeon": document, "generation_log": {"request_id": req_row.id}})

    gen_log.start_step("save_dungeon")
    element = WorldElement(
        world_id=world_id,
        type="dungeon",
        name=dungeon.name,
        summary=f"{dungeon.type} - {dungeon.theme}",
        detail=document,
    )
    db.session.add(element)
    req_row.status = "completed"
    db.session.commit()
    gen_log.log("save_dungeon", "dungeon stored", data={"dungeon_id": element.id})
    gen_log.end_step("save_dungeon")
    gen_log.flush()
    log.info(event="dungeon_saved", dungeon_id=element.id, world_id=world_id, request_id=req_row.id)
    return jsonify({"dungeon_id": element.id, "dungeon": document, "generation_log": {"request_id": req_row.id}})


@bp_dungeon.route("/api/dungeons/<dungeon_id>", methods=["GET"])
def get_dungeon(dungeon_id):
    element = db.session.get(WorldElement, dungeon_id)
    if element is None or element.type != "dungeon":
        return jsonify({"error": "dungeon not found"}), 404
    data = element.to_dict()
    return jsonify({"dungeon_id": data.pop("id"), "dungeon": data.pop("detail"), **data})


@bp_dungeon.route("/api/dungeons/<dungeon_id>/levels/<int:level_index>/map-image", methods=["PUT"])
def set_level_map_image(dungeon_id, level_index):
    """Image-enhancement write-back: set ``map_image_url`` on one level."""
    element = db.session.get(WorldElement, dungeon_id)
    if element is None or element.type != "dungeon":
        return jsonify({"error": "dungeon not found"}), 404
    ok, body = validate(request.get_json(silent=True), MAP_IMAGE)
    if not ok:
        return _bad_request(body["error"], field=body["field"], code=body["code"])
    detail = DungeonDetail.from_dict(element.detail)
    levels = [lvl for lvl in detail.levels if lvl.level_index == level_index]
    if not levels:
        return jsonify({"error": "level not found"}), 404
    levels[0].map_image_url = body["url"]
    # Assign a new document so the JSON column registers the change
    element.detail = detail.to_dict()
    db.session.commit()
    return jsonify({"dungeon_id": element.id, "level_index": level_index, "map_image_url": body["url"]})


@bp_dungeon.route("/api/generation-requests/<request_id>/logs", methods=["GET"])
def get_generation_logs(request_id):
    req_row = db.session.get(GenerationRequest, request_id)
    if req_row is None:
        return jsonify({"error": "generation request not found"}), 404
    rows = (
        GenerationLog.query.filter_by(request_id=request_id)
        .order_by(GenerationLog.id.asc())
        .all()
    )
    return jsonify({"request_id": req_row.id, "status": req_row.status, "logs": [r.to_dict() for r in rows]})
