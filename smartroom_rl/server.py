# =============================================================================
# Learner Server
# =============================================================================
"""
Flask API exposing the learner's operations to calling agents.

Routes:
-------
POST /api/train    {"goal": [2, 3], "episodes": 500, "alpha": 0.1,
                    "gamma": 0.9, "epsilon": 0.2, "reward": 100}
POST /api/cancel   cancel the running and queued trainings
POST /api/action   {"goal": [2, 3], "state": [2, 2, 1, 0, 1, 1, 2]}
GET  /api/status?goal=2,3
GET  /api/state    live state of the lab

The learner is not thread-safe, so every call into it runs under one lock.
Each training request carries its own cancel event. Cancelling does not take
the lock: it sets the event of every request that is running or still
waiting for the lock, and a later request starts uncancelled.
"""

import threading
from typing import Optional

from flask import Flask, jsonify, request

from smartroom_rl.agents.q_learner import QLearner
from smartroom_rl.exceptions import ConfigurationError


def create_app(learner: Optional[QLearner] = None) -> Flask:
    """
    Build the Flask app around a learner.

    Parameters:
    -----------
    learner : QLearner, optional
        Learner to serve. Defaults to one bound to a fresh simulated lab.
    """
    if learner is None:
        from smartroom_rl.environment.lab_env import SmartRoomLab
        learner = QLearner(SmartRoomLab())

    app = Flask(__name__)
    engine_lock = threading.Lock()
    pending_lock = threading.Lock()
    pending_runs = set()
    app.config["LEARNER"] = learner
    app.config["PENDING_RUNS"] = pending_runs

    @app.route("/api/train", methods=["POST"])
    def train():
        body = request.get_json(silent=True) or {}
        missing = [k for k in ("goal", "episodes", "alpha", "gamma", "epsilon", "reward")
                   if k not in body]
        if missing:
            return jsonify({"error": f"Missing parameters: {', '.join(missing)}"}), 400

        cancel_event = threading.Event()
        with pending_lock:
            pending_runs.add(cancel_event)
        try:
            with engine_lock:
                report = learner.calculate_q(
                    body["goal"], body["episodes"], body["alpha"],
                    body["gamma"], body["epsilon"], body["reward"],
                    cancel_event=cancel_event,
                )
        except ConfigurationError as e:
            return jsonify({"error": str(e)}), 400
        finally:
            with pending_lock:
                pending_runs.discard(cancel_event)

        if report is None:
            return jsonify({"error": f"Goal {body['goal']} is not reachable"}), 422

        summary = report.to_dict()
        summary.pop("episodes")
        return jsonify(summary)

    @app.route("/api/cancel", methods=["POST"])
    def cancel():
        with pending_lock:
            runs = list(pending_runs)
        for cancel_event in runs:
            cancel_event.set()
        return jsonify({"cancelled": True, "runs": len(runs)})

    @app.route("/api/action", methods=["POST"])
    def action():
        body = request.get_json(silent=True) or {}
        with engine_lock:
            response = learner.get_action_from_state(body.get("goal"), body.get("state"))
        return jsonify(response._asdict())

    @app.route("/api/status")
    def status():
        goal = [part for part in request.args.get("goal", "").split(",") if part]
        with engine_lock:
            text = learner.get_q_table_status(goal)
        return jsonify({"goal": goal, "status": text})

    @app.route("/api/state")
    def state():
        with engine_lock:
            index = learner.env.read_current_state()
            vector = learner.env.state_vector(index)
        return jsonify({"index": index, "state": vector})

    return app
