from nova.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from nova.app.models.tutor import Tutor  # noqa: F401
from nova.app.models.student import Student  # noqa: F401
from nova.app.models.tutor_student import TutorStudent  # noqa: F401
from nova.app.models.connection import StudentTutorConnection  # noqa: F401
from nova.app.models.session import Session  # noqa: F401
from nova.app.models.parent import Parent  # noqa: F401
from nova.app.models.tutor_profile import TutorProfile, TutorProfileSubject  # noqa: F401
