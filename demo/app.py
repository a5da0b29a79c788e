#!/usr/bin/env python3
"""
Interactive Demo - Flask server exposing the smart room learner.

Run with: python demo/app.py [--config configs/smart_room.yaml]
Then e.g.:
    curl -X POST localhost:5001/api/train -H 'Content-Type: application/json' \
         -d '{"goal": [2, 3], "episodes": 500, "alpha": 0.1, "gamma": 0.9, "epsilon": 0.2, "reward": 100}'
    curl -X POST localhost:5001/api/action -H 'Content-Type: application/json' \
         -d '{"goal": [2, 3], "state": [0, 2, 0, 1, 0, 0, 2]}'
"""

import argparse
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from smartroom_rl.agents.q_learner import QLearner
from smartroom_rl.server import create_app
from smartroom_rl.training.experiment_config import create_default_config, load_config


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Serve the smart room learner")
    parser.add_argument("--config", type=str, default=None, help="YAML config file")
    parser.add_argument("--port", type=int, default=5001, help="Port (default: 5001)")
    args = parser.parse_args()

    config = load_config(args.config) if args.config else create_default_config("demo")
    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO))

    print("Creating learner...")
    app = create_app(QLearner.from_config(config))
    print("\n" + "=" * 50)
    print(f"Demo running at http://localhost:{args.port}")
    print("=" * 50 + "\n")
    app.run(host="0.0.0.0", port=args.port, debug=False, threaded=True)
