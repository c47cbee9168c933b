"""Predefined projects available to every user before anyone lists their own."""

from typing import Any, Dict, List

from pymongo.database import Database

from database import now_utc
from logging_config import get_logger
from schemas import SYSTEM_OWNER, Project

logger = get_logger(__name__)

PREDEFINED_PROJECTS: List[Dict[str, Any]] = [
    {
        "title": "Social Media Dashboard",
        "description": "Build a comprehensive social media management dashboard that allows users to schedule posts, "
        "track analytics, and manage multiple social accounts from one place.",
        "techStack": ["Next.js", "TypeScript", "Tailwind CSS", "MongoDB", "NextAuth"],
        "category": "fullstack",
        "difficulty": "intermediate",
        "estimatedDuration": "4-6 weeks",
        "features": ["Multi-platform posting", "Analytics dashboard", "Content calendar", "Post scheduling"],
        "learningOutcomes": ["API integration", "Real-time data visualization", "Database design"],
        "requiredSkills": ["React", "Node.js", "Database design", "API integration"],
        "image": "/projects/social-dashboard.jpg",
    },
    {
        "title": "AI-Powered Task Manager",
        "description": "Create an intelligent task management application that uses AI to prioritize tasks, "
        "suggest optimal schedules, and provide productivity insights.",
        "techStack": ["React", "Python", "FastAPI", "OpenAI API", "PostgreSQL"],
        "category": "ai",
        "difficulty": "advanced",
        "estimatedDuration": "6-8 weeks",
        "features": ["AI task prioritization", "Smart scheduling", "Productivity analytics"],
        "learningOutcomes": ["AI/ML integration", "Natural language processing", "API development"],
        "requiredSkills": ["Python", "Machine Learning", "React", "API development"],
        "image": "/projects/ai-task-manager.jpg",
    },
    {
        "title": "Expense Tracker Mobile App",
        "description": "Develop a mobile application for tracking personal expenses with category management, "
        "budget alerts, and spending analytics.",
        "techStack": ["React Native", "Expo", "Firebase", "TypeScript"],
        "category": "mobile",
        "difficulty": "beginner",
        "estimatedDuration": "3-4 weeks",
        "features": ["Expense categorization", "Budget tracking", "Spending analytics", "Export to CSV"],
        "learningOutcomes": ["Cross-platform development", "Local storage management", "Data visualization"],
        "requiredSkills": ["React Native", "JavaScript", "Mobile UI design"],
        "image": "/projects/expense-tracker.jpg",
    },
    {
        "title": "Weather Data Visualization",
        "description": "Develop an interactive weather data visualization dashboard using machine learning to "
        "predict weather patterns and display insights.",
        "techStack": ["Python", "Streamlit", "Pandas", "Scikit-learn", "Plotly"],
        "category": "data-science",
        "difficulty": "intermediate",
        "estimatedDuration": "4-5 weeks",
        "features": ["Interactive weather maps", "Prediction models", "Historical data analysis"],
        "learningOutcomes": ["Data science workflows", "Machine learning models", "Statistical analysis"],
        "requiredSkills": ["Python", "Data Science", "Machine Learning", "Visualization"],
        "image": "/projects/weather-dashboard.jpg",
    },
    {
        "title": "Blockchain Voting System",
        "description": "Develop a secure voting system using blockchain technology to ensure transparency and "
        "immutability of votes.",
        "techStack": ["Solidity", "Web3.js", "React", "Ethereum", "IPFS"],
        "category": "blockchain",
        "difficulty": "advanced",
        "estimatedDuration": "7-10 weeks",
        "features": ["Smart contract voting", "Voter authentication", "Immutable records"],
        "learningOutcomes": ["Smart contracts", "Decentralized applications", "Web3 integration"],
        "requiredSkills": ["Solidity", "Blockchain", "Web3", "Cryptography"],
        "image": "/projects/blockchain-voting.jpg",
    },
    {
        "title": "API Monitoring Dashboard",
        "description": "Build a comprehensive API monitoring and analytics dashboard that tracks performance, "
        "uptime, and provides detailed insights.",
        "techStack": ["Node.js", "Express", "Redis", "PostgreSQL", "React"],
        "category": "backend",
        "difficulty": "intermediate",
        "estimatedDuration": "4-6 weeks",
        "features": ["Real-time monitoring", "Performance analytics", "Uptime tracking", "Alert system"],
        "learningOutcomes": ["Backend architecture", "Monitoring systems", "System reliability"],
        "requiredSkills": ["Node.js", "Backend development", "Monitoring", "Databases"],
        "image": "/projects/api-monitoring.jpg",
    },
]


def seed_projects(db: Database) -> Dict[str, Any]:
    """Insert the predefined projects once; later calls only report what exists."""
    existing = db["project"].count_documents({"isPredefined": True})
    if existing > 0:
        return {"message": "Predefined projects already exist", "count": existing}

    stamp = now_utc()
    docs = []
    for item in PREDEFINED_PROJECTS:
        doc = Project(**item, createdBy=SYSTEM_OWNER, isPredefined=True).model_dump()
        doc["createdAt"] = stamp
        doc["updatedAt"] = stamp
        docs.append(doc)
    result = db["project"].insert_many(docs)
    logger.info("Database seeded", count=len(result.inserted_ids))
    return {
        "message": "Database seeded successfully",
        "count": len(result.inserted_ids),
        "projects": [{"id": str(_id), "title": d["title"]} for _id, d in zip(result.inserted_ids, docs)],
    }


def seed_status(db: Database) -> Dict[str, int]:
    predefined = db["project"].count_documents({"isPredefined": True})
    user_created = db["project"].count_documents({"isPredefined": False})
    return {"predefinedProjects": predefined, "userProjects": user_created, "total": predefined + user_created}
