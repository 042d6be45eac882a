from sqlalchemy.ext.declarative import declarative_base

Base = declarative_base()
import eduplatform.models.course
import eduplatform.models.instructor_application
import eduplatform.models.user_role
import eduplatform.models.notification
import eduplatform.models.instructor_follow
import eduplatform.models.user_profile
