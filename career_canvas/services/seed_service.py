# career_canvas/services/seed_service.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import InternalError
from ..models import ConnectionRequest, Mentor, MentorInterest, MentorSkill

logger = logging.getLogger(__name__)

SAMPLE_MENTORS: List[Dict[str, Any]] = [
    {
        "name": "Sarah Johnson",
        "email": "sarah.johnson@company.com",
        "title": "Senior Software Engineer",
        "department": "Engineering",
        "skills": ["React", "TypeScript", "Leadership", "System Design", "Node.js", "Azure"],
        "bio": "Passionate about helping junior developers grow their careers. 8+ years in full-stack development with expertise in modern web technologies and cloud architecture.",
        "experience": 8,
        "availability": "available",
        "rating": 4.9,
        "mentee_count": 15,
        "interests": ["career-growth", "technical-skills", "leadership"],
        "active_minutes_ago": 0,
        "mentorship_history": {
            "totalMentees": 25,
            "completedSessions": 150,
            "averageRating": 4.8,
            "specializations": ["Frontend Development", "Career Transition", "Technical Leadership"],
        },
    },
    {
        "name": "Michael Chen",
        "email": "michael.chen@company.com",
        "title": "Principal Product Manager",
        "department": "Product",
        "skills": ["Product Strategy", "Data Analysis", "Agile", "User Research", "SQL", "Python"],
        "bio": "Former engineer turned PM with 10+ years experience. Love helping people transition between technical and business roles.",
        "experience": 10,
        "availability": "limited",
        "rating": 4.7,
        "mentee_count": 12,
        "interests": ["career-transition", "product-management", "strategy"],
        "active_minutes_ago": 120,
        "mentorship_history": {
            "totalMentees": 18,
            "completedSessions": 95,
            "averageRating": 4.6,
            "specializations": ["Product Management", "Technical to Business Transition", "Analytics"],
        },
    },
    {
        "name": "Jessica Rodriguez",
        "email": "jessica.rodriguez@company.com",
        "title": "Marketing Director",
        "department": "Marketing",
        "skills": ["Digital Marketing", "Brand Strategy", "Team Management", "Analytics", "Social Media", "Content Strategy"],
        "bio": "Helping marketing professionals advance their careers and build strong personal brands. Expert in digital transformation and growth marketing.",
        "experience": 12,
        "availability": "available",
        "rating": 4.8,
        "mentee_count": 20,
        "interests": ["marketing", "brand-building", "career-advancement"],
        "active_minutes_ago": 30,
        "mentorship_history": {
            "totalMentees": 35,
            "completedSessions": 200,
            "averageRating": 4.7,
            "specializations": ["Digital Marketing", "Brand Development", "Leadership"],
        },
    },
    {
        "name": "David Park",
        "email": "david.park@company.com",
        "title": "Principal Engineer",
        "department": "Engineering",
        "skills": ["Cloud Architecture", "Microservices", "DevOps", "Mentoring", "Kubernetes", "AWS"],
        "bio": "Cloud architecture expert with a passion for building scalable systems and growing engineering talent. 15+ years in distributed systems.",
        "experience": 15,
        "availability": "busy",
        "rating": 4.9,
        "mentee_count": 30,
        "interests": ["technical-architecture", "engineering-leadership", "cloud-technologies"],
        "active_minutes_ago": 300,
        "mentorship_history": {
            "totalMentees": 45,
            "completedSessions": 300,
            "averageRating": 4.9,
            "specializations": ["System Architecture", "Cloud Engineering", "Technical Leadership"],
        },
    },
    {
        "name": "Amanda Foster",
        "email": "amanda.foster@company.com",
        "title": "UX Design Lead",
        "department": "Design",
        "skills": ["User Experience", "Design Systems", "Research", "Prototyping", "Figma", "Design Thinking"],
        "bio": "Design leader focused on creating user-centered experiences and mentoring emerging designers. Expert in design systems and user research.",
        "experience": 9,
        "availability": "available",
        "rating": 4.6,
        "mentee_count": 14,
        "interests": ["design", "user-experience", "creative-careers"],
        "active_minutes_ago": 60,
        "mentorship_history": {
            "totalMentees": 22,
            "completedSessions": 130,
            "averageRating": 4.5,
            "specializations": ["UX Design", "Design Systems", "User Research"],
        },
    },
    {
        "name": "Robert Kim",
        "email": "robert.kim@company.com",
        "title": "Senior Data Scientist",
        "department": "Analytics",
        "skills": ["Machine Learning", "Python", "Statistics", "Data Visualization", "SQL", "TensorFlow"],
        "bio": "ML engineer passionate about democratizing data science and helping others break into the field. PhD in Computer Science.",
        "experience": 7,
        "availability": "limited",
        "rating": 4.8,
        "mentee_count": 8,
        "interests": ["data-science", "machine-learning", "career-transition"],
        "active_minutes_ago": 240,
        "mentorship_history": {
            "totalMentees": 15,
            "completedSessions": 85,
            "averageRating": 4.7,
            "specializations": ["Data Science", "Machine Learning", "Analytics"],
        },
    },
    {
        "name": "Lisa Thompson",
        "email": "lisa.thompson@company.com",
        "title": "VP of Engineering",
        "department": "Engineering",
        "skills": ["Executive Leadership", "Team Building", "Strategic Planning", "Agile", "Hiring", "Culture"],
        "bio": "Engineering executive with 20+ years experience building high-performing teams. Former startup founder and current VP at Fortune 500.",
        "experience": 20,
        "availability": "limited",
        "rating": 4.9,
        "mentee_count": 25,
        "interests": ["executive-coaching", "leadership", "team-building"],
        "active_minutes_ago": 360,
        "mentorship_history": {
            "totalMentees": 50,
            "completedSessions": 250,
            "averageRating": 4.8,
            "specializations": ["Executive Leadership", "Team Management", "Strategic Planning"],
        },
    },
    {
        "name": "Carlos Martinez",
        "email": "carlos.martinez@company.com",
        "title": "Sales Director",
        "department": "Sales",
        "skills": ["Sales Strategy", "Client Relations", "Negotiation", "CRM", "Team Leadership", "Business Development"],
        "bio": "Sales leader with expertise in enterprise software sales and team development. Passionate about helping sales professionals reach their potential.",
        "experience": 11,
        "availability": "available",
        "rating": 4.7,
        "mentee_count": 16,
        "interests": ["sales", "business-development", "leadership"],
        "active_minutes_ago": 45,
        "mentorship_history": {
            "totalMentees": 28,
            "completedSessions": 180,
            "averageRating": 4.6,
            "specializations": ["Sales Leadership", "Enterprise Sales", "Client Management"],
        },
    },
    {
        "name": "Priya Patel",
        "email": "priya.patel@company.com",
        "title": "DevOps Engineer",
        "department": "Engineering",
        "skills": ["CI/CD", "Docker", "Kubernetes", "AWS", "Terraform", "Monitoring"],
        "bio": "DevOps specialist focused on automation and scalability. Helping teams adopt modern deployment practices and cloud-native technologies.",
        "experience": 6,
        "availability": "available",
        "rating": 4.5,
        "mentee_count": 10,
        "interests": ["devops", "cloud-computing", "automation"],
        "active_minutes_ago": 20,
        "mentorship_history": {
            "totalMentees": 12,
            "completedSessions": 75,
            "averageRating": 4.4,
            "specializations": ["DevOps", "Cloud Infrastructure", "Automation"],
        },
    },
    {
        "name": "James Wilson",
        "email": "james.wilson@company.com",
        "title": "Finance Manager",
        "department": "Finance",
        "skills": ["Financial Analysis", "Budgeting", "Excel", "PowerBI", "Risk Management", "Strategy"],
        "bio": "Finance professional with expertise in financial planning and analysis. Helping others navigate corporate finance and develop analytical skills.",
        "experience": 13,
        "availability": "limited",
        "rating": 4.6,
        "mentee_count": 18,
        "interests": ["finance", "analytics", "career-development"],
        "active_minutes_ago": 180,
        "mentorship_history": {
            "totalMentees": 24,
            "completedSessions": 140,
            "averageRating": 4.5,
            "specializations": ["Financial Analysis", "Corporate Finance", "Business Strategy"],
        },
    },
]


def build_mentor(sample: Dict[str, Any], now: datetime) -> Mentor:
    fields = {k: v for k, v in sample.items() if k not in ("skills", "interests", "active_minutes_ago")}
    mentor = Mentor(
        last_active=now - timedelta(minutes=sample["active_minutes_ago"]),
        created_at=now,
        updated_at=now,
        **fields,
    )
    mentor.skills = sample["skills"]
    mentor.interests = sample["interests"]
    return mentor


class SeedService:
    def __init__(self, db: Session):
        self.db = db

    def seed_mentors(self) -> List[Mentor]:
        """Replaces the whole mentor directory with the sample mentors"""
        now = datetime.now(timezone.utc)
        try:
            # Child rows first; SQLite does not enforce ON DELETE CASCADE by default
            self.db.execute(delete(ConnectionRequest))
            self.db.execute(delete(MentorSkill))
            self.db.execute(delete(MentorInterest))
            self.db.execute(delete(Mentor))
            mentors = [build_mentor(sample, now) for sample in SAMPLE_MENTORS]
            self.db.add_all(mentors)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error seeding mentors: {e}")
            raise InternalError("Failed to seed mentors", details=str(e))

        logger.info(f"Seeded {len(mentors)} mentors")
        return mentors


if __name__ == "__main__":
    from ..database import Database

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    database = Database()
    database.create_all()
    with database.session() as db:
        seeded = SeedService(db).seed_mentors()
        for mentor in seeded:
            print(f"  {mentor.name} ({mentor.department}) - {mentor.title}")
