from veris_identity.application.sagas.registration_saga import RegistrationSaga

__all__ = ["RegistrationSaga"]
