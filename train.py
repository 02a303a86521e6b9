#!/usr/bin/env python3
"""
train.py — headless PPO обучение колибри.

Использование:
    python train.py --steps 500000
    python train.py --preset crowded --steps 1000000
    python train.py --resume models/hummingbird_ppo.zip --lr 0.0001
"""

import argparse
import logging
import os
import sys
import time


def parse_args():
    p = argparse.ArgumentParser(description="Train a hummingbird with PPO")
    p.add_argument("--preset", choices=["training", "crowded"], default="training",
                   help="Simulation preset (default: training)")
    p.add_argument("--steps", type=int, default=500_000,
                   help="Total training timesteps (default: 500000)")
    p.add_argument("--lr", type=float, default=3e-4,
                   help="Learning rate (default: 3e-4)")
    p.add_argument("--batch-size", type=int, default=64,
                   help="Minibatch size (default: 64)")
    p.add_argument("--n-steps", type=int, default=2048,
                   help="Steps per rollout (default: 2048)")
    p.add_argument("--max-episode-steps", type=int, default=5000,
                   help="Max steps per episode (default: 5000)")
    p.add_argument("--save-dir", type=str, default="models",
                   help="Directory to save trained models (default: models/)")
    p.add_argument("--log-dir", type=str, default="logs",
                   help="Tensorboard log directory (default: logs/)")
    p.add_argument("--resume", type=str, default=None,
                   help="Path to model .zip to resume training from")
    p.add_argument("--seed", type=int, default=42,
                   help="Random seed (default: 42)")
    p.add_argument("--device", type=str, default="auto",
                   help="PyTorch device: auto|cpu|cuda (default: auto)")
    p.add_argument("--n-envs", type=int, default=0,
                   help="Number of parallel environments (0=auto, based on CPU cores)")
    p.add_argument("--log-level", default="WARNING",
                   help="Logging level for the simulation (default: WARNING)")
    return p.parse_args()


def main():
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    # Ленивый импорт, чтобы --help работал без torch
    try:
        from stable_baselines3 import PPO
        from stable_baselines3.common.callbacks import (
            CheckpointCallback, EvalCallback, CallbackList
        )
        from stable_baselines3.common.monitor import Monitor
        from stable_baselines3.common.vec_env import DummyVecEnv, SubprocVecEnv
    except ImportError:
        print("ERROR: stable-baselines3 not installed.")
        print("Run:  pip install -e '.[train]'")
        sys.exit(1)

    from ai.gym_env import HummingbirdEnv
    from garden.config import Presets

    if args.n_envs <= 0:
        import multiprocessing
        n_envs = max(1, multiprocessing.cpu_count() - 1)
    else:
        n_envs = args.n_envs

    effective_n_steps = max(args.n_steps // n_envs, 512)
    # batch_size не может быть больше n_steps * n_envs
    effective_batch = min(args.batch_size, effective_n_steps * n_envs)

    print("=" * 60)
    print(f"  Hummingbird Garden — PPO Training ({args.preset})")
    print("=" * 60)
    print(f"  Total steps   : {args.steps:,}")
    print(f"  Learning rate  : {args.lr}")
    print(f"  Batch size     : {effective_batch}")
    print(f"  Rollout steps  : {effective_n_steps} × {n_envs} envs = {effective_n_steps * n_envs}")
    print(f"  Episode max    : {args.max_episode_steps}")
    print(f"  Device         : {args.device}")
    print(f"  Seed           : {args.seed}")
    print(f"  Resume from    : {args.resume or 'scratch'}")
    print("=" * 60)

    os.makedirs(args.save_dir, exist_ok=True)
    os.makedirs(args.log_dir, exist_ok=True)

    def make_env(rank: int):
        def _init():
            config = Presets.by_name(args.preset)
            config.max_steps = args.max_episode_steps
            # У каждой среды свой сад
            env = HummingbirdEnv(config=config, layout_seed=args.seed + rank)
            env.reset(seed=args.seed + rank)
            return Monitor(env)
        return _init

    if n_envs > 1:
        vec_env = SubprocVecEnv([make_env(i) for i in range(n_envs)])
    else:
        vec_env = DummyVecEnv([make_env(0)])
    eval_env = DummyVecEnv([make_env(10_000)])

    if args.resume and os.path.exists(args.resume):
        print(f"\nResuming from {args.resume} ...")
        model = PPO.load(
            args.resume,
            env=vec_env,
            device=args.device,
            learning_rate=args.lr,
            n_steps=effective_n_steps,
            batch_size=effective_batch,
        )
    else:
        print("\nCreating new PPO model ...")
        model = PPO(
            policy="MlpPolicy",
            env=vec_env,
            learning_rate=args.lr,
            n_steps=effective_n_steps,
            batch_size=effective_batch,
            n_epochs=10,
            gamma=0.99,
            gae_lambda=0.95,
            clip_range=0.2,
            ent_coef=0.001,
            vf_coef=0.7,
            max_grad_norm=0.5,
            verbose=1,
            seed=args.seed,
            device=args.device,
            tensorboard_log=args.log_dir,
            policy_kwargs=dict(net_arch=dict(pi=[128, 128], vf=[128, 128])),
        )

    model_name = "hummingbird_ppo"
    checkpoint_cb = CheckpointCallback(
        save_freq=max(args.steps // 10 // n_envs, 1000),
        save_path=args.save_dir,
        name_prefix=model_name,
        verbose=1,
    )
    best_dir = os.path.join(args.save_dir, "best_hummingbird")
    os.makedirs(best_dir, exist_ok=True)
    eval_cb = EvalCallback(
        eval_env,
        best_model_save_path=best_dir,
        log_path=args.log_dir,
        eval_freq=max(args.steps // 20 // n_envs, 1000),
        n_eval_episodes=5,
        deterministic=True,
        verbose=1,
    )

    t0 = time.time()
    print(f"\nTraining for {args.steps:,} steps...\n")
    try:
        model.learn(
            total_timesteps=args.steps,
            callback=CallbackList([checkpoint_cb, eval_cb]),
            progress_bar=True,
        )
    finally:
        vec_env.close()
        eval_env.close()
    elapsed = time.time() - t0

    final_path = os.path.join(args.save_dir, f"{model_name}.zip")
    model.save(final_path)

    print("\n" + "=" * 60)
    print("  Training complete!")
    print(f"  Time elapsed : {elapsed:.1f}s ({elapsed/60:.1f}m)")
    print(f"  Model saved  : {final_path}")
    print(f"  Tensorboard  : tensorboard --logdir {args.log_dir}")
    print("=" * 60)


if __name__ == "__main__":
    main()
