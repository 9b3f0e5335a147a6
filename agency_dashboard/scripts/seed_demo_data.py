"""
Demo data generation for local development.

Creates employees in every department, tasks across all priorities and
statuses, a few announcements and clients. Task transitions go through the
lifecycle service so user points, completedTasks and streaks stay consistent
with the tasks that exist.

    python -m agency_dashboard.scripts.seed_demo_data --employees 18 --tasks 60
"""
import argparse
import asyncio
import random
from datetime import timedelta

from faker import Faker

from agency_dashboard.database import AsyncSessionLocal, init_models
from agency_dashboard.models.announcement import Announcement
from agency_dashboard.models.choices import EMPLOYEE_DEPARTMENTS, ClientStatus, Priority, TaskStatus
from agency_dashboard.models.client import Client
from agency_dashboard.schemas.task import TaskCreate, TaskUpdate
from agency_dashboard.schemas.user import RegisterRequest
from agency_dashboard.services import accounts
from agency_dashboard.services import tasks as task_service
from agency_dashboard.utils.dates import utcnow

DEMO_PASSWORD = "password123"

TASK_TITLES = {
    "Web": ["Landing page refresh", "Checkout flow fixes", "Core Web Vitals pass"],
    "AI": ["Chatbot intent tuning", "Lead scoring model", "Support ticket triage"],
    "SEO": ["Keyword gap analysis", "Backlink audit", "Schema markup rollout"],
    "Ads": ["Q3 search campaign", "Retargeting audiences", "Budget pacing review"],
    "Graphics": ["Brand kit update", "Social carousel set", "Event banner pack"],
    "Accounts": ["Invoice reconciliation", "Vendor payments run", "GST filing prep"],
    "HR": ["Onboarding checklist", "Quarterly engagement survey", "Leave policy draft"],
    "Social": ["Content calendar", "Influencer outreach", "Community replies sweep"],
}


class DemoDataBuilder:
    """Holds one run's generated records; nothing is shared between runs."""

    def __init__(self, db, seed: int | None = None):
        self.db = db
        self.fake = Faker()
        self.random = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)
        self.admin = None
        self.employees = []
        self.tasks = []

    async def create_employees(self, count: int):
        self.admin = await accounts.ensure_admin_account(self.db)
        for _ in range(count):
            department = self.random.choice(EMPLOYEE_DEPARTMENTS).value
            data = RegisterRequest(
                name=self.fake.unique.first_name(),
                phone=self.fake.unique.numerify("9#########"),
                department=department,
                password=DEMO_PASSWORD,
            )
            self.employees.append(await accounts.register_employee(self.db, data))
        print(f"Created {len(self.employees)} employees (password: {DEMO_PASSWORD})")

    async def create_tasks(self, count: int):
        now = utcnow()
        for _ in range(count):
            assignee = self.random.choice(self.employees)
            title = self.random.choice(TASK_TITLES.get(assignee.department, ["General follow-up"]))
            data = TaskCreate(
                title=title,
                description=self.fake.sentence(nb_words=12),
                department=assignee.department,
                assigned_to_id=assignee.id,
                deadline=now + timedelta(days=self.random.randint(-5, 21)),
                priority=self.random.choice(list(Priority)),
                assigned_at=now - timedelta(days=self.random.randint(0, 40)),
            )
            task = await task_service.create_task(self.db, data, self.admin)

            final_status = self.random.choices(
                [TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED],
                weights=[3, 3, 4],
            )[0]
            if final_status is not TaskStatus.PENDING:
                task = await task_service.update_task(
                    self.db, task.id, TaskUpdate(status=TaskStatus.IN_PROGRESS), self.admin
                )
            if final_status is TaskStatus.COMPLETED:
                task = await task_service.update_task(
                    self.db, task.id, TaskUpdate(status=TaskStatus.COMPLETED), self.admin
                )
            self.tasks.append(task)
        print(f"Created {len(self.tasks)} tasks")

    async def create_announcements(self, count: int = 3):
        for _ in range(count):
            self.db.add(Announcement(
                title=self.fake.catch_phrase(),
                message=self.fake.paragraph(nb_sentences=2),
                author=self.admin.name,
                priority=self.random.choice(list(Priority)).value,
            ))
        await self.db.commit()
        print(f"Created {count} announcements")

    async def create_clients(self, count: int = 6):
        for _ in range(count):
            approved = self.random.random() < 0.7
            self.db.add(Client(
                name=self.fake.company(),
                business_type=self.random.choice(["individual", "partnership", "company"]),
                industry=self.random.choice(["healthcare", "retail", "education", "real estate"]),
                email=self.fake.company_email(),
                phone=self.fake.numerify("9#########"),
                address=self.fake.street_address(),
                city=self.fake.city(),
                website=self.fake.url(),
                status=(ClientStatus.APPROVED if approved else ClientStatus.PENDING).value,
                assigned_employee_id=self.random.choice(self.employees).id if approved else None,
            ))
        await self.db.commit()
        print(f"Created {count} clients")


async def run(employees: int, tasks: int, seed: int | None):
    await init_models()
    async with AsyncSessionLocal() as db:
        builder = DemoDataBuilder(db, seed=seed)
        await builder.create_employees(employees)
        await builder.create_tasks(tasks)
        await builder.create_announcements()
        await builder.create_clients()


def main():
    parser = argparse.ArgumentParser(description="Populate the agency dashboard with demo data")
    parser.add_argument("--employees", type=int, default=18)
    parser.add_argument("--tasks", type=int, default=60)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()
    asyncio.run(run(args.employees, args.tasks, args.seed))


if __name__ == "__main__":
    main()
