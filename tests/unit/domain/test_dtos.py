from datetime import date

import pytest

from tests.factories.user import VALID_PASSWORD, create_fake_user, registration_payload
from userauth.core.exceptions import DTOValidationError
from userauth.domain.dtos import (
    CreateUserDTO,
    GetAllUsersInputDTO,
    LogoutRequestDTO,
    PaginationDTO,
    ResetPasswordDTO,
    UpdateUserDTO,
    UserResponseDTO,
)


class TestCreateUserDTO:
    def test_accepts_camel_case_keys(self):
        dto = CreateUserDTO.validate_data(registration_payload())

        assert dto.repeat_password == VALID_PASSWORD
        assert dto.role.value == "user"

    @pytest.mark.parametrize("password", ["Sh0rt!a", "alllowercase1!", "NoSpecial123", "NoDigits!!aa"])
    def test_rejects_weak_passwords(self, password):
        payload = registration_payload(password=password, repeatPassword=password)

        with pytest.raises(DTOValidationError) as exc_info:
            CreateUserDTO.validate_data(payload)

        assert "password" in exc_info.value.get_formatted_errors()

    def test_minimal_password_with_every_class_is_accepted(self):
        payload = registration_payload(password="Sh0rt!ab", repeatPassword="Sh0rt!ab")

        assert CreateUserDTO.validate_data(payload).password == "Sh0rt!ab"

    def test_name_must_be_alphanumeric(self):
        with pytest.raises(DTOValidationError) as exc_info:
            CreateUserDTO.validate_data(registration_payload(name="john doe"))

        assert "name" in exc_info.value.get_formatted_errors()

    def test_mismatched_passwords_pass_dto_validation(self):
        dto = CreateUserDTO.validate_data(registration_payload(repeatPassword="Other1!pass"))

        assert dto.password != dto.repeat_password

    def test_unparseable_birth_date_is_dropped(self):
        dto = CreateUserDTO.validate_data(registration_payload(birthDate="not-a-date"))

        assert dto.birth_date is None

    def test_iso_birth_date_is_parsed(self):
        dto = CreateUserDTO.validate_data(registration_payload(birthDate="1990-05-17T00:00:00Z"))

        assert dto.birth_date == date(1990, 5, 17)


class TestUpdateUserDTO:
    def test_update_dict_only_contains_sent_fields(self):
        dto = UpdateUserDTO.validate_data({"name": "John Doe", "isVerified": True})

        assert dto.to_update_dict() == {"name": "John Doe", "is_verified": True}

    def test_empty_update_gives_empty_dict(self):
        assert UpdateUserDTO.validate_data({}).to_update_dict() == {}


class TestPaginationInput:
    @pytest.mark.parametrize("data", [{"page": 0}, {"limit": 0}, {"limit": 101}])
    def test_bounds(self, data):
        with pytest.raises(DTOValidationError):
            GetAllUsersInputDTO.validate_data(data)

    def test_defaults(self):
        dto = GetAllUsersInputDTO.validate_data({})

        assert (dto.page, dto.limit) == (1, 10)


class TestAuthDTOs:
    def test_logout_tokens_are_optional(self):
        dto = LogoutRequestDTO.validate_data({})

        assert dto.access_token is None and dto.refresh_token is None

    def test_logout_rejects_malformed_access_token(self):
        with pytest.raises(DTOValidationError):
            LogoutRequestDTO.validate_data({"accessToken": "not a jwt"})

    def test_reset_password_reads_password_key(self):
        dto = ResetPasswordDTO.validate_data({"token": "abc", "password": "N3wP@ssword"})

        assert dto.new_password == "N3wP@ssword"


class TestOutputDTOs:
    def test_user_response_has_no_password(self):
        user = create_fake_user(password="hashed:secret")

        response = UserResponseDTO.from_entity(user)

        assert "password" not in response.model_dump()
        assert response.id == user.id

    @pytest.mark.parametrize("total,limit,last_page", [(0, 10, 0), (10, 10, 1), (11, 10, 2), (95, 20, 5)])
    def test_last_page(self, total, limit, last_page):
        page = PaginationDTO[UserResponseDTO](body=[], total=total, page=1, limit=limit)

        assert page.last_page == last_page
        assert page.model_dump()["last_page"] == last_page
