"""Read-only workspace data (tasks, projects, teams) used to build prompts."""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from better_projects_ai.errors import NotFoundError
from better_projects_ai.models.domain import SummaryKind, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)


@dataclass
class TeamMember:
    name: str
    role: str
    email: Optional[str] = None


@dataclass
class Team:
    id: str
    name: str
    description: Optional[str] = None
    organization: Optional[str] = None
    members: List[TeamMember] = field(default_factory=list)


@dataclass
class Project:
    id: str
    name: str
    status: str = "active"
    description: Optional[str] = None
    team_id: Optional[str] = None
    start_date: Optional[str] = None
    target_end_date: Optional[str] = None


@dataclass
class Task:
    id: str
    title: str
    project_id: str
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    description: Optional[str] = None
    assignee: Optional[str] = None
    story_points: Optional[int] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    due_date: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    comment_count: int = 0


def _task_breakdown(tasks: List[Task]) -> Dict[str, Any]:
    counts = {status.value: 0 for status in TaskStatus}
    for task in tasks:
        counts[task.status.value] += 1
    total = len(tasks)
    completed = counts[TaskStatus.COMPLETED.value]
    return {
        "total": total,
        "by_status": counts,
        "percent_complete": round(completed / total * 100) if total else 0,
    }


class WorkspaceStore:
    """In-memory lookup of the entities that summaries are written about."""

    def __init__(
        self,
        tasks: Optional[List[Task]] = None,
        projects: Optional[List[Project]] = None,
        teams: Optional[List[Team]] = None,
    ):
        self.tasks: Dict[str, Task] = {t.id: t for t in tasks or []}
        self.projects: Dict[str, Project] = {p.id: p for p in projects or []}
        self.teams: Dict[str, Team] = {t.id: t for t in teams or []}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkspaceStore":
        tasks = []
        for raw in data.get("tasks", []):
            raw = dict(raw)
            raw["status"] = TaskStatus(raw.get("status", TaskStatus.TODO.value))
            raw["priority"] = TaskPriority(raw.get("priority", TaskPriority.MEDIUM.value))
            tasks.append(Task(**raw))
        projects = [Project(**raw) for raw in data.get("projects", [])]
        teams = []
        for raw in data.get("teams", []):
            raw = dict(raw)
            raw["members"] = [TeamMember(**m) for m in raw.get("members", [])]
            teams.append(Team(**raw))
        return cls(tasks=tasks, projects=projects, teams=teams)

    @classmethod
    def from_file(cls, path: str) -> "WorkspaceStore":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        store = cls.from_dict(data)
        logger.info(
            f"Loaded workspace from {path}: {len(store.tasks)} tasks, "
            f"{len(store.projects)} projects, {len(store.teams)} teams"
        )
        return store

    def get_task(self, task_id: str) -> Task:
        try:
            return self.tasks[task_id]
        except KeyError:
            raise NotFoundError("task", task_id) from None

    def get_project(self, project_id: str) -> Project:
        try:
            return self.projects[project_id]
        except KeyError:
            raise NotFoundError("project", project_id) from None

    def get_team(self, team_id: str) -> Team:
        try:
            return self.teams[team_id]
        except KeyError:
            raise NotFoundError("team", team_id) from None

    def context_for(self, kind: SummaryKind, entity_id: str) -> Dict[str, Any]:
        """Collect the data a summary prompt is written from."""
        if kind == SummaryKind.TASK:
            task = self.get_task(entity_id)
            project = self.projects.get(task.project_id)
            context = asdict(task)
            context["project"] = project.name if project else None
            return context

        if kind == SummaryKind.PROJECT:
            project = self.get_project(entity_id)
            tasks = [t for t in self.tasks.values() if t.project_id == project.id]
            team = self.teams.get(project.team_id) if project.team_id else None
            context = asdict(project)
            context["tasks"] = [
                {"title": t.title, "status": t.status.value, "priority": t.priority.value}
                for t in tasks
            ]
            context["task_breakdown"] = _task_breakdown(tasks)
            context["team"] = asdict(team) if team else None
            return context

        team = self.get_team(entity_id)
        team_projects = [p for p in self.projects.values() if p.team_id == team.id]
        context = asdict(team)
        context["projects"] = [
            {
                "name": p.name,
                "status": p.status,
                "task_breakdown": _task_breakdown(
                    [t for t in self.tasks.values() if t.project_id == p.id]
                ),
            }
            for p in team_projects
        ]
        return context


def sample_workspace() -> WorkspaceStore:
    """Small built-in workspace used when no data file is configured."""
    return WorkspaceStore.from_dict(
        {
            "teams": [
                {
                    "id": "team-01",
                    "name": "Engineering Team Alpha",
                    "description": "Core product engineering",
                    "organization": "Better Projects",
                    "members": [
                        {"name": "John Doe", "role": "Team Lead", "email": "john@example.com"},
                        {"name": "Jane Smith", "role": "Developer", "email": "jane@example.com"},
                        {"name": "Lisa Park", "role": "QA Engineer", "email": "lisa@example.com"},
                    ],
                }
            ],
            "projects": [
                {
                    "id": "proj-01",
                    "name": "Mobile App Redesign",
                    "status": "active",
                    "description": "Rebuild onboarding and payments for the mobile app",
                    "team_id": "team-01",
                    "start_date": "2024-03-01",
                    "target_end_date": "2024-07-15",
                },
                {
                    "id": "proj-02",
                    "name": "Reporting Dashboard Overhaul",
                    "status": "active",
                    "team_id": "team-01",
                    "start_date": "2024-04-01",
                },
            ],
            "tasks": [
                {
                    "id": "task-01",
                    "title": "API Integration for Payment Gateway",
                    "project_id": "proj-01",
                    "status": "IN_PROGRESS",
                    "priority": "HIGH",
                    "description": "Integrate the payment provider SDK, including international transactions",
                    "assignee": "John Doe",
                    "story_points": 8,
                    "estimated_hours": 24,
                    "actual_hours": 16,
                    "tags": ["api", "backend"],
                    "comment_count": 3,
                },
                {
                    "id": "task-02",
                    "title": "Simplify onboarding flow",
                    "project_id": "proj-01",
                    "status": "COMPLETED",
                    "priority": "MEDIUM",
                    "assignee": "Jane Smith",
                    "tags": ["ui", "design"],
                },
                {
                    "id": "task-03",
                    "title": "Accessibility compliance testing",
                    "project_id": "proj-01",
                    "status": "TODO",
                    "priority": "MEDIUM",
                    "tags": ["testing"],
                },
                {
                    "id": "task-04",
                    "title": "Migrate report queries to the warehouse",
                    "project_id": "proj-02",
                    "status": "BLOCKED",
                    "priority": "HIGHEST",
                    "assignee": "Lisa Park",
                },
            ],
        }
    )
