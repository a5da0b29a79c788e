#!/usr/bin/env python3
# =============================================================================
# Train Q-Table
# =============================================================================
"""
Train a Q-table for one illuminance goal in the simulated smart room.

Usage:
------
# Basic training for goal [2, 3]
python scripts/train_q.py --goal 2 3

# Custom hyperparameters
python scripts/train_q.py --goal 1 1 --episodes 2000 --alpha 0.2 --epsilon 0.3

# From a YAML config, then query the trained policy
python scripts/train_q.py --config configs/smart_room.yaml --query 0 2 0 1 0 0 2
"""

import argparse
import logging
import os
import sys

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Train a goal-conditioned Q-table")

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML config file (command line values override it)"
    )
    parser.add_argument(
        "--goal",
        type=int,
        nargs=2,
        default=None,
        metavar=("Z1", "Z2"),
        help="Target illuminance levels (default: 2 3)"
    )

    # Training
    parser.add_argument("--episodes", type=int, default=None, help="Training episodes (default: 500)")
    parser.add_argument("--alpha", type=float, default=None, help="Learning rate (default: 0.1)")
    parser.add_argument("--gamma", type=float, default=None, help="Discount factor (default: 0.9)")
    parser.add_argument("--epsilon", type=float, default=None, help="Exploration rate (default: 0.2)")
    parser.add_argument("--reward", type=float, default=None, help="Goal reward (default: 100)")

    # Reporting
    parser.add_argument(
        "--evaluate",
        type=int,
        default=100,
        help="Greedy evaluation episodes after training, 0 to skip (default: 100)"
    )
    parser.add_argument(
        "--query",
        type=int,
        nargs=7,
        default=None,
        help="State vector to query the trained policy with"
    )
    parser.add_argument(
        "--save-config",
        type=str,
        default=None,
        help="Write the effective config to this YAML file"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: 42)")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: INFO)")

    return parser.parse_args()


def build_config(args):
    """Merge the YAML config (if any) with command line overrides."""
    from smartroom_rl.training.experiment_config import create_default_config, load_config

    config = load_config(args.config) if args.config else create_default_config("train_q")

    if args.goal is not None:
        config.goal = list(args.goal)
    if args.seed is not None:
        config.seed = args.seed
    if args.log_level is not None:
        config.log_level = args.log_level
    for name in ("episodes", "alpha", "gamma", "epsilon"):
        value = getattr(args, name)
        if value is not None:
            setattr(config.training, name, value)
    if args.reward is not None:
        config.training.goal_reward = args.reward

    config.training.validate()
    return config


def main():
    """Main training function."""
    args = parse_args()

    from smartroom_rl.agents.descriptions import GoalDescription
    from smartroom_rl.agents.q_learner import QLearner
    from smartroom_rl.evaluation.metrics import EvaluationSuite
    from smartroom_rl.exceptions import ConfigurationError

    try:
        config = build_config(args)
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}")
        sys.exit(2)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    training = config.training
    print("=" * 60)
    print("Q-Learning Training")
    print("=" * 60)
    print(f"Goal:           {config.goal}")
    print(f"Episodes:       {training.episodes}")
    print(f"Alpha:          {training.alpha}")
    print(f"Gamma:          {training.gamma}")
    print(f"Epsilon:        {training.epsilon}")
    print(f"Goal reward:    {training.goal_reward}")
    print("=" * 60)
    print()

    if args.save_config:
        config.save(args.save_config)
        print(f"Saved config to: {args.save_config}")

    learner = QLearner.from_config(config)
    report = learner.calculate_q(
        config.goal,
        training.episodes,
        training.alpha,
        training.gamma,
        training.epsilon,
        training.goal_reward,
    )
    if report is None:
        print(f"Goal {config.goal} is not reachable in this environment.")
        sys.exit(1)

    print()
    print(learner.get_q_table_status(config.goal))
    print(f"Episodes run:   {report.episodes_run} (early stop: {report.early_stopped})")
    print(f"Success rate:   {report.success_rate:.1%}")

    if args.evaluate > 0:
        suite = EvaluationSuite(
            learner.env,
            goal_reward=training.goal_reward,
            reward_weights=config.reward,
            seed=config.seed,
        )
        suite.evaluate(
            learner.get_q_table(config.goal),
            GoalDescription.from_raw(config.goal),
            num_episodes=args.evaluate,
            verbose=True,
        )

    if args.query is not None:
        response = learner.get_action_from_state(config.goal, args.query)
        print()
        print(f"Best action from {args.query}:")
        print(f"  tag:          {response.action_tag}")
        print(f"  payload tags: {response.payload_tags}")
        print(f"  payload:      {response.payload}")


if __name__ == "__main__":
    main()
