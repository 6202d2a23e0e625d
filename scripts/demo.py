#!/usr/bin/env python3
"""
Demo script for the GreenOps planner.

This script:
- Verifies the API is running
- Requests plans for a sample workload
- Prints each strategy's placement and scores
- Optionally deploys one plan (dry-run unless the server enables deploys)
- Shows the resulting deployment analytics
"""

import argparse
import asyncio
import sys

import aiohttp

SAMPLE_WORKLOAD = [
    {"name": "storefront", "type": "frontend"},
    {"name": "orders-api", "type": "api-gateway"},
    {"name": "checkout-worker", "type": "container"},
    {"name": "orders-db", "type": "database"},
]


class DemoRunner:
    """Run a planning walkthrough against a live server."""

    def __init__(self, base_url: str = "http://localhost:4000"):
        self.base_url = base_url.rstrip("/")

    async def check_health(self, session: aiohttp.ClientSession) -> dict | None:
        """Service status, or None if the API is unreachable."""
        try:
            async with session.get(f"{self.base_url}/api/health") as response:
                if response.status != 200:
                    return None
                return await response.json()
        except aiohttp.ClientError:
            return None

    async def request_plans(
        self,
        session: aiohttp.ClientSession,
        user_region: str,
        latency_tolerance: str,
    ) -> dict:
        body = {
            "components": SAMPLE_WORKLOAD,
            "userRegion": user_region,
            "latencyTolerance": latency_tolerance,
        }
        async with session.post(f"{self.base_url}/api/plan", json=body) as response:
            response.raise_for_status()
            return await response.json()

    async def deploy(self, session: aiohttp.ClientSession, plan: dict) -> dict:
        body = {
            "planId": plan["id"],
            "region": plan["civo"]["region"],
            "regionLabel": plan["civo"]["regionLabel"],
            "carbonIntensity": plan["carbonIntensity"]["value_gCo2PerKwh"],
            "replicas": plan["civo"]["replicas"],
            "scores": plan["scores"],
            "kubernetesYaml": plan["kubernetesYaml"],
        }
        async with session.post(f"{self.base_url}/api/deploy", json=body) as response:
            return await response.json()

    async def get_analytics(self, session: aiohttp.ClientSession) -> dict:
        async with session.get(f"{self.base_url}/api/analytics") as response:
            return await response.json()

    def print_header(self, title: str):
        """Print a section header."""
        print()
        print("=" * 60)
        print(f" {title}")
        print("=" * 60)

    def print_plan(self, plan: dict):
        placement = plan["civo"]
        scores = plan["scores"]
        carbon = plan["carbonIntensity"]
        print(f"  {plan['label']}")
        print(f"    Region:     {placement['region']} ({placement['regionLabel']})")
        print(f"    Instance:   {placement['instanceClass']} x {placement['replicas']}")
        print(f"    Carbon:     {carbon['value_gCo2PerKwh']} gCO2eq/kWh ({carbon['source']})")
        print(
            f"    Scores:     overall {scores['overall']:.2f} | co2 {scores['co2']:.2f} | "
            f"latency {scores['latency']:.2f} | cost {scores['cost']:.2f}"
        )

    def print_summary(self, analytics: dict):
        summary = analytics.get("summary", {})
        print(f"  Deployments:  {summary.get('totalDeployments', 0)}")
        print(f"  Hourly CO2:   {summary.get('totalEstimatedHourlyCO2Kg', 0)} kg")
        print(f"  Hourly cost:  ${summary.get('totalEstimatedHourlyCostUsd', 0)}")
        print(f"  Savings:      ${summary.get('estimatedHourlySavingsUsd', 0)} per hour")

    async def run_demo(
        self,
        user_region: str = "eu-west",
        latency_tolerance: str = "balanced",
        deploy_strategy: str | None = None,
    ) -> int:
        """Run the walkthrough; returns a process exit code."""
        print("\n" + "=" * 60)
        print(" GREENOPS PLANNER - DEMO")
        print("=" * 60)

        async with aiohttp.ClientSession() as session:
            self.print_header("Checking System Health")
            status = await self.check_health(session)
            if status is None:
                print("  ERROR: API is not responding!")
                print("  Please start the server: python -m greenops.api.main")
                return 1
            print("  API is healthy and running")
            print(f"  Live carbon data: {status['electricityMaps']['configured']}")
            print(f"  Cluster deploy:   {status['deploy']['enabled']}")

            self.print_header(f"Plans for {user_region} ({latency_tolerance} latency)")
            result = await self.request_plans(session, user_region, latency_tolerance)
            for plan in result["plans"]:
                self.print_plan(plan)

            if deploy_strategy:
                plan = next((p for p in result["plans"] if p["id"] == deploy_strategy), None)
                if plan is None:
                    print(f"\n  Unknown strategy: {deploy_strategy}")
                    return 1

                self.print_header(f"Deploying {plan['label']}")
                outcome = await self.deploy(session, plan)
                print(f"  Status:   {outcome.get('status', 'error')}")
                print(f"  Message:  {outcome.get('message') or outcome.get('error')}")
                if outcome.get("command"):
                    print(f"  Command:  {outcome['command']}")

            self.print_header("Deployment Analytics")
            self.print_summary(await self.get_analytics(session))

        print()
        print("=" * 60)
        print(" Demo finished!")
        print("=" * 60)
        return 0


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="Run GreenOps planner demo")
    parser.add_argument("--url", type=str, default="http://localhost:4000", help="API URL")
    parser.add_argument("--region", type=str, default="eu-west", help="User region affinity")
    parser.add_argument(
        "--tolerance",
        choices=["strict", "balanced", "relaxed"],
        default="balanced",
        help="Latency tolerance",
    )
    parser.add_argument(
        "--deploy",
        choices=["balanced", "max-green", "budget"],
        default=None,
        help="Deploy the plan for this strategy",
    )
    args = parser.parse_args()

    demo = DemoRunner(base_url=args.url)
    sys.exit(asyncio.run(demo.run_demo(args.region, args.tolerance, args.deploy)))


if __name__ == "__main__":
    main()
