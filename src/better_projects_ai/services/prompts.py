"""Summary prompt templates and last-resort placeholder summaries.

The response structure in each template is relied on by the client's
streaming renderer, which styles `#`, `##`, `###`, `-`/`*` and blank lines.
"""

import json
from typing import Any, Dict

from better_projects_ai.models.domain import PromptRequest, SummaryKind

SYSTEM_PROMPT = (
    "You are an AI assistant that provides insightful, business-oriented summaries of tasks, "
    "projects, and teams. Your summaries should be concise, actionable, and tailored to "
    "different stakeholders like product owners, CTOs, and team leaders."
)

FORMAT_REQUIREMENTS = """FORMAT REQUIREMENTS:
- Use proper Markdown formatting with clear headings using # for main title, ## for sections, and ### for subsections
- Use bullet points with - or * for lists
- Use bold (**text**) for emphasis on important points
- Use blockquotes (> text) for highlighting key insights or warnings
- Use numbered lists (1. 2. 3.) for sequential steps or prioritized items
- Include 1-2 key statistics or metrics for each stakeholder section if possible
- Format any code snippets or technical details in code blocks using ``` (triple backticks)"""

CLOSING = "Format your response in clear, professional language appropriate for a business context."

STAKEHOLDERS = {
    SummaryKind.TASK: ["Product Owner", "CTO", "Team Leadership"],
    SummaryKind.PROJECT: ["Executive Leadership", "Product Management", "Engineering Leadership"],
    SummaryKind.TEAM: ["CEO", "CTO", "Director of Product"],
}

TEMPLATES = {
    SummaryKind.TASK: """Please generate an insightful summary of this task with ID {entity_id}.

The summary should include sections targeted at different stakeholders (Product Owner, CTO, Team Leadership).
Include an executive summary at the top, and insights about timeline, blockers, risks, and next steps if applicable.

TASK DATA:
{data}

{format_requirements}

RESPONSE STRUCTURE (follow this format):
# Executive Summary: [Task Title]

Brief overview of the task status and importance (2-3 sentences)

## For the Product Owner
Insights relevant to product strategy, timeline, and business value

## For the CTO
Technical insights, architecture decisions, and impact on the system

## For Team Leadership
Resource allocation, team coordination, and performance insights

## Risk Assessment
* **Risk level**: Description and mitigation strategy

{closing}""",
    SummaryKind.PROJECT: """Please generate an insightful summary of this project with ID {entity_id}.

The summary should include sections targeted at different stakeholders (Executive Leadership, Product Management, Engineering Leadership).
Include an executive overview at the top, and insights about progress, risks, and focus areas.

PROJECT DATA:
{data}

{format_requirements}

RESPONSE STRUCTURE (follow this format):
# Executive Overview: [Project Name]

Brief overview of project status, timeline, and strategic importance (2-3 sentences)

## For Executive Leadership
High-level insights on business impact, resource utilization, and strategic alignment

## For Product Management
Features, user feedback, market fit, and roadmap insights

## For Engineering Leadership
Technical progress, architecture decisions, and team performance

## Current Focus Areas
1. [Area 1] - Brief description and owner
2. [Area 2] - Brief description and owner
3. [Area 3] - Brief description and owner

## Risk Management
* **High risk**: Description and mitigation strategy
* **Medium risk**: Description and mitigation strategy
* **Low risk**: Description and mitigation strategy

{closing}""",
    SummaryKind.TEAM: """Please generate an insightful summary of this team with ID {entity_id}.

The summary should include sections targeted at different stakeholders (CEO, CTO, Director of Product).
Include insights about team performance, focus areas, capacity, and development needs.

TEAM DATA:
{data}

{format_requirements}

RESPONSE STRUCTURE (follow this format):
# Team Performance Report: [Team Name]

Brief overview of the team composition, responsibilities, and general performance (2-3 sentences)

## For the CEO
Strategic value, contribution to business goals, and ROI insights

## For the CTO
Technical capabilities, code quality metrics, and innovation impact

## For the Director of Product
Delivery metrics, collaboration quality, and product impact insights

## Current Focus & Capacity
* Project A: [percentage]% of capacity - Status
* Project B: [percentage]% of capacity - Status
* Project C: [percentage]% of capacity - Status

## Risk Assessment
* **Risk level**: Description and mitigation strategy

## Development Needs
Identified skill gaps, growth opportunities, and recommended investments

{closing}""",
}


def build_summary_prompt(
    kind: SummaryKind, entity_id: str, data: Dict[str, Any], model: str
) -> PromptRequest:
    user_prompt = TEMPLATES[kind].format(
        entity_id=entity_id,
        data=json.dumps(data, indent=2, default=str),
        format_requirements=FORMAT_REQUIREMENTS,
        closing=CLOSING,
    )
    return PromptRequest(system_prompt=SYSTEM_PROMPT, user_prompt=user_prompt, model=model)


MOCK_SUMMARIES = {
    SummaryKind.TASK: """# Executive Summary: API Integration for Payment Gateway

John Doe has been working on this task for 5 days and appears to be making steady progress. Based on the comment history and recent updates, the task will likely require another 3-4 days to complete. The complexity lies primarily in handling edge cases for international transactions.

## For the Product Owner
This payment gateway integration is a critical dependency for the Q2 release. The team is addressing the security concerns raised in the last sprint review, with special attention to PCI compliance requirements. John has implemented 70% of the planned functionality, and testing is already underway for the completed portions.

## For the CTO
The implementation uses the recommended third-party SDK rather than building a custom solution, which reduces security risks and maintenance burden. The current blocker involves transaction reconciliation across multiple currencies, which requires input from the finance team.

## For Team Leadership
While John is managing well, this task's completion timeline could be accelerated by having Lisa assist with the unit testing portion. She has previous experience with similar payment integrations and could reduce overall delivery time by approximately 2 days.

## Risk Assessment
* **Medium risk**: The API provider has scheduled maintenance this weekend that could impact development testing
* **Low risk**: Documentation for international transaction error codes is incomplete, but the team has direct contact with the vendor's support team

> This is a placeholder summary shown because no AI-generated summary is available yet.""",
    SummaryKind.PROJECT: """# Executive Overview: Mobile App Redesign Project

The mobile app redesign project is currently 33% complete and tracking on schedule for the planned July 15th release. The team has completed the user research phase and finalized the design system, with development now in active progress.

## For Executive Leadership
This project addresses our declining mobile engagement metrics, with usability testing of initial prototypes showing a 40% improvement in key user flows. The project is currently on budget, with resource allocation as planned.

## For Product Management
User testing has validated that the account management flow was a significant pain point. The simplified onboarding process has tested particularly well, and the A/B testing framework has been implemented ahead of schedule.

## For Engineering Leadership
The new component architecture has already reduced build times by 30%. Code quality metrics show a 15% improvement in test coverage compared to the previous version.

## Current Focus Areas
1. Payment flow implementation - Alex & Team
2. Performance optimization for older Android devices - Maria
3. Accessibility compliance testing - James

## Risk Management
* **High risk**: Marketing campaign timing - requires coordination with the launch; weekly sync established
* **Medium risk**: Backend API scalability - load testing scheduled for next week
* **Low risk**: App Store review timelines - mitigated by a buffer period before public release

> This is a placeholder summary shown because no AI-generated summary is available yet.""",
    SummaryKind.TEAM: """# Team Performance Report: Engineering Team Alpha

Engineering Team Alpha consists of 8 engineers led by John Doe, with cross-functional expertise spanning frontend, backend, and DevOps. The team is managing 3 active projects and has delivered consistently over the past quarter.

## For the CEO
This team is responsible for 40% of our core product initiatives and has maintained a 92% on-time delivery rate. Their work on the customer data platform contributed directly to enterprise revenue growth this quarter.

## For the CTO
Team Alpha completed its migration to a microservices architecture 2 weeks ahead of schedule. Test coverage sits at 89%, with a 27% reduction in production incidents compared to the previous quarter.

## For the Director of Product
Collaboration with product stakeholders has improved, and a "shift left" testing approach has reduced QA cycles by 30%.

## Current Focus & Capacity
* Project A: 45% of capacity - On track
* Project B: 35% of capacity - At risk
* Project C: 20% of capacity - Ahead of schedule

## Risk Assessment
* **Medium risk**: Project B may slip due to third-party API changes; deferring advanced reporting is recommended

## Development Needs
The team would benefit from additional machine learning expertise, through targeted hiring or training for 1-2 existing team members.

> This is a placeholder summary shown because no AI-generated summary is available yet.""",
}


def mock_summary(kind: SummaryKind) -> str:
    return MOCK_SUMMARIES[kind]
