import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from study_partner.services.seeding import seed_demo_profiles


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo study-partner profiles")
    parser.add_argument("--n-profiles", type=int, default=20)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    summary = seed_demo_profiles(n_profiles=args.n_profiles, seed=args.seed)

    print("Seed completed")
    for k, v in summary.items():
        print(f"- {k}: {v}")


if __name__ == "__main__":
    main()
