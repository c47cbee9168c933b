"""
Database Schemas for the DevDost matching API

Each collection model maps to a MongoDB collection with the lowercase class name.
- User -> "user"
- Session -> "session"
- Project -> "project"
- Interest -> "interest"
- Match -> "match"

The remaining models are request/response bodies validated at the API boundary
before anything reaches the matching engine.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictBool

Category = Literal[
    "fullstack", "frontend", "backend", "mobile", "data-science",
    "machine-learning", "ai", "blockchain", "devops", "other",
]
Difficulty = Literal["beginner", "intermediate", "advanced"]
ProjectStatus = Literal["draft", "active", "in-progress", "completed", "archived"]
MatchStatus = Literal["pending", "active", "completed", "cancelled"]

SYSTEM_OWNER = "system"


class ContactPreferences(BaseModel):
    email: EmailStr
    whatsapp: str = ""
    telegram: str = ""


class User(BaseModel):
    """
    Developer profiles
    Collection name: "user"
    """
    email: EmailStr = Field(..., description="Unique, lowercased")
    name: str = Field(..., description="Display name from the identity provider")
    image: str = ""
    bio: str = Field("", max_length=500)
    skills: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    location: str = ""
    experience: Difficulty = "beginner"
    contactPreferences: ContactPreferences
    githubProfile: str = ""
    portfolioUrl: str = ""
    profileCompleted: bool = False


class Session(BaseModel):
    """
    User sessions (auth tokens)
    Collection name: "session"
    """
    user_id: str = Field(..., description="User ObjectId as string")
    token: str = Field(..., description="Auth token")
    expires_at: datetime = Field(..., description="Expiration time (UTC)")


class Project(BaseModel):
    """
    Project listings users swipe on
    Collection name: "project"
    """
    title: str = Field(..., max_length=100)
    description: str = Field(..., max_length=1000)
    techStack: List[str] = Field(default_factory=list, description="Ordered")
    category: Category
    difficulty: Difficulty
    estimatedDuration: str = "2-4 weeks"
    features: List[str] = Field(default_factory=list)
    learningOutcomes: List[str] = Field(default_factory=list)
    requiredSkills: List[str] = Field(default_factory=list)
    teamSize: int = 2
    lookingFor: List[str] = Field(default_factory=list)
    communicationPreference: str = "Email"
    timezone: str = "UTC"
    commitmentLevel: str = "Part-time"
    githubRepo: str = ""
    liveDemo: str = ""
    image: str = ""
    createdBy: str = Field(..., description="User id, or 'system' for predefined projects")
    isPredefined: bool = False
    isActive: bool = True
    status: ProjectStatus = "active"
    viewCount: int = 0
    interestCount: int = 0
    matchCount: int = 0


class Interest(BaseModel):
    """
    Swipe decisions, one per (userId, projectId)
    Collection name: "interest"
    """
    userId: str
    projectId: str
    interested: bool = Field(..., description="True for swipe right")


class Match(BaseModel):
    """
    Mutual interest of two users on one project
    Collection name: "match"
    """
    projectId: str
    user1Id: str = Field(..., description="User whose swipe completed the pair")
    user2Id: str = Field(..., description="User who was interested first")
    pairKey: str = Field(..., description="Both user ids sorted and joined")
    status: MatchStatus = "pending"
    matchedAt: datetime
    conversationStarted: bool = False
    notes: str = Field("", max_length=500)


# ---------------------------------------------------------------------------
# Request / response bodies
# ---------------------------------------------------------------------------

class IdentitySignIn(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    image: Optional[str] = None


class ProfileSetup(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    bio: str = Field(..., min_length=10, max_length=500)
    skills: List[str] = Field(..., min_length=2)
    interests: List[str] = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    experience: Difficulty
    contactPreferences: ContactPreferences
    githubProfile: str = ""
    portfolioUrl: str = ""


class SwipeRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    projectId: str = Field(..., min_length=1)
    interested: StrictBool


class SwipeMatch(BaseModel):
    matchId: str
    projectTitle: str
    otherUserName: str
    otherUserEmail: Optional[str] = None


class SwipeResponse(BaseModel):
    success: bool
    match: Optional[SwipeMatch] = None
    message: str


class ProjectCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=50, max_length=1000)
    techStack: List[str] = Field(..., min_length=1, max_length=15)
    category: Category
    difficulty: Difficulty
    estimatedDuration: str = "2-4 weeks"
    features: List[str] = Field(..., min_length=1, max_length=20)
    learningOutcomes: List[str] = Field(default_factory=list)
    requiredSkills: List[str] = Field(..., min_length=1, max_length=10)
    teamSize: int = Field(2, ge=1, le=10)
    lookingFor: List[str] = Field(default_factory=list)
    communicationPreference: str = "Email"
    timezone: str = "UTC"
    commitmentLevel: str = "Part-time"
    githubRepo: str = ""
    liveDemo: str = ""


class ProjectUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, min_length=50, max_length=1000)
    techStack: Optional[List[str]] = Field(None, min_length=1, max_length=15)
    category: Optional[Category] = None
    difficulty: Optional[Difficulty] = None
    estimatedDuration: Optional[str] = None
    features: Optional[List[str]] = Field(None, min_length=1, max_length=20)
    learningOutcomes: Optional[List[str]] = None
    requiredSkills: Optional[List[str]] = Field(None, min_length=1, max_length=10)
    teamSize: Optional[int] = Field(None, ge=1, le=10)
    lookingFor: Optional[List[str]] = None
    communicationPreference: Optional[str] = None
    timezone: Optional[str] = None
    commitmentLevel: Optional[str] = None
    githubRepo: Optional[str] = None
    liveDemo: Optional[str] = None
    status: Optional[ProjectStatus] = None


class MatchUpdate(BaseModel):
    status: Optional[MatchStatus] = None
    conversationStarted: Optional[StrictBool] = None
    notes: Optional[str] = Field(None, max_length=500)
