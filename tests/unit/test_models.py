"""Tests for the data models and their derived properties."""

from datetime import datetime, timedelta, timezone

import pytest

from luidgpt.models import (
    CATEGORY_DEFINITIONS,
    Category,
    CreditBalance,
    CreditPackage,
    CreditTransaction,
    ExecuteModelResponse,
    GenerationStatus,
    InputSchema,
    MemberUser,
    ModelGeneration,
    ModelsPage,
    Organization,
    OrganizationInvitation,
    OrganizationMember,
    OutputType,
    PaginationInfo,
    RegisterResponse,
    ReplicateModel,
    Tier,
    User,
    category_icon,
    default_credits,
    format_api_datetime,
    is_valid_email,
    is_valid_password,
    parse_api_datetime,
    password_strength,
)
from luidgpt.models.base import compact_count
from luidgpt.models.generation import format_execution_time


class TestDates:

    def test_backend_format_with_milliseconds(self) -> None:
        parsed = parse_api_datetime("2024-05-01T12:30:00.123Z")
        assert parsed == datetime(2024, 5, 1, 12, 30, 0, 123000, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [
        "2024-05-01T12:30:00Z",
        "2024-05-01T12:30:00+00:00",
        "2024-05-01T14:30:00+02:00",
        "2024-05-01T12:30:00",
    ])
    def test_iso_variants(self, value: str) -> None:
        assert parse_api_datetime(value) == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    def test_format_round_trip(self) -> None:
        value = datetime(2024, 5, 1, 12, 30, 0, 123456, tzinfo=timezone.utc)
        assert format_api_datetime(value) == "2024-05-01T12:30:00.123Z"

    def test_json_dump_uses_backend_format(self, user_payload) -> None:
        data = User.model_validate(user_payload).model_dump(mode="json", by_alias=True)
        assert data["createdAt"] == "2024-05-01T12:30:00.123Z"
        assert data["firstName"] == "Ada"


class TestPagination:

    def test_backend_pages(self) -> None:
        info = PaginationInfo.model_validate({"page": 1, "limit": 20, "total": 45, "pages": 3})
        assert info.pages == 3
        assert info.has_more is True

    def test_last_page(self) -> None:
        assert PaginationInfo.model_validate({"page": 3, "limit": 20, "total": 45, "pages": 3}).has_more is False

    def test_luidhub_shape(self) -> None:
        info = PaginationInfo.model_validate({"page": 2, "limit": 10, "total": 20, "total_pages": 2, "has_more": False})
        assert info.pages == 2
        assert info.has_more is False


class TestUsers:

    def test_full_name_fallbacks(self, user_payload) -> None:
        assert User.model_validate(user_payload).full_name == "Ada Lovelace"
        assert User.model_validate({**user_payload, "name": "Countess"}).full_name == "Countess"

        anonymous = {**user_payload, "firstName": None, "lastName": None}
        assert User.model_validate(anonymous).full_name == "ada"

    def test_initials_and_credits(self, user_payload) -> None:
        user = User.model_validate({**user_payload, "credits": 1500})
        assert user.initials == "AL"
        assert user.credits_display == "1.5k"
        assert user.has_low_credits is False
        assert User.model_validate({**user_payload, "credits": 9}).has_low_credits is True

    def test_unknown_fields_are_ignored(self, user_payload) -> None:
        user = User.model_validate({**user_payload, "someNewField": 1})
        assert user.id == "user-1"

    def test_organization(self, organization_payload) -> None:
        org = Organization.model_validate(organization_payload)
        assert org.initials == "AS"
        assert org.credits_display == "2.5k"
        assert Organization.model_validate({**organization_payload, "name": "acme"}).initials == "AC"

    def test_member_display(self) -> None:
        member = MemberUser(id="u", email="bob@example.com", first_name="Bob", last_name="Stone")
        assert member.full_name == "Bob Stone"
        assert member.initials == "BS"

        bare = MemberUser(id="u", email="bob@example.com")
        assert bare.full_name == "bob@example.com"
        assert bare.initials == "BO"

    @pytest.mark.parametrize("role, can_manage", [("owner", True), ("admin", True), ("member", False)])
    def test_member_permissions(self, role: str, can_manage: bool) -> None:
        member = OrganizationMember.model_validate({
            "id": "m", "organizationId": "org-1", "userId": "u", "role": role,
            "joinedAt": "2024-05-01T12:30:00.000Z",
        })
        assert member.role_display_name == role.capitalize()
        assert member.can_manage_members is can_manage
        assert member.can_manage_credits is can_manage

    def test_invitation_expiry(self) -> None:
        def invitation(expires: datetime, status: str = "pending") -> OrganizationInvitation:
            return OrganizationInvitation.model_validate({
                "id": "inv", "organizationId": "org-1", "email": "x@y.co", "role": "member",
                "token": "tok", "status": status, "expiresAt": expires.isoformat(),
                "invitedBy": "user-1", "createdAt": "2024-05-01T12:30:00.000Z",
            })

        now = datetime.now(timezone.utc)
        assert invitation(now + timedelta(days=1)).is_pending is True
        assert invitation(now - timedelta(days=1)).is_expired is True
        assert invitation(now - timedelta(days=1)).is_pending is False
        assert invitation(now + timedelta(days=1), status="accepted").is_pending is False


class TestCategories:

    def test_eleven_fixed_categories(self) -> None:
        assert len(CATEGORY_DEFINITIONS) == 11
        assert [d.sort_order for d in CATEGORY_DEFINITIONS] == list(range(1, 12))

    def test_icons_and_default_credits(self) -> None:
        assert category_icon("video-generation") == "video.fill"
        assert category_icon("nonexistent") == "square.grid.2x2"
        assert default_credits("video-generation") == 10
        assert default_credits("nonexistent") == 2

    def test_category_decoding(self) -> None:
        category = Category.model_validate({
            "id": "c", "slug": "3d-models", "name": "3D Models", "outputType": "3d", "modelCount": 4,
        })
        assert category.output_type is OutputType.THREE_D
        assert category.icon == "cube.fill"
        assert category.model_count == 4


class TestReplicateModel:

    def test_tags_and_display(self, model_payload) -> None:
        model = ReplicateModel.model_validate(model_payload)

        assert model.tier is Tier.PREMIUM
        assert model.tier.display_name == "Premium"
        assert model.style_tags == ["cinematic"]
        assert model.speed_tag == "slow"
        assert model.quality_tag == "high"
        assert model.speed_estimate == "2m+"
        assert model.has_tag("speed:slow")
        assert model.category_slug == "video-generation"

    def test_credit_cost_fallbacks(self, model_payload) -> None:
        assert ReplicateModel.model_validate(model_payload).effective_credit_cost == 10

        from_category = {**model_payload, "creditCost": None}
        from_category["category"] = {**model_payload["category"], "creditCostDefault": 7}
        assert ReplicateModel.model_validate(from_category).effective_credit_cost == 7

        bare = {"id": "m", "modelId": "a/b", "name": "B"}
        model = ReplicateModel.model_validate(bare)
        assert model.effective_credit_cost == 2
        assert model.category_slug == "utility"
        assert model.speed_estimate == "~30s"

    def test_provider_and_time_display(self, model_payload) -> None:
        model = ReplicateModel.model_validate({**model_payload, "provider": "black-forest-labs"})
        assert model.provider_display_name == "Black Forest Labs"

        assert ReplicateModel.model_validate({**model_payload, "estimatedTimeSeconds": 3}).estimated_time_display == "<5s"
        assert ReplicateModel.model_validate({**model_payload, "estimatedTimeSeconds": 45}).estimated_time_display == "45s"
        assert ReplicateModel.model_validate({**model_payload, "estimatedTimeSeconds": 150}).estimated_time_display == "2m"

    def test_display_image_prefers_cover(self, model_payload) -> None:
        model = ReplicateModel.model_validate({**model_payload, "thumbnailUrl": "t.png", "coverImage": "c.png"})
        assert model.display_image == "c.png"

    def test_input_schema(self) -> None:
        schema = InputSchema.model_validate({
            "type": "object",
            "properties": {"prompt": {"type": "string"}, "steps": {"type": "integer", "default": 30}},
            "required": ["prompt"],
        })
        assert schema.is_required("prompt")
        assert not schema.is_required("steps")
        assert schema.properties["steps"].default == 30

    def test_models_page(self, model_payload) -> None:
        page = ModelsPage.model_validate({
            "success": True,
            "data": [model_payload],
            "pagination": {"page": 1, "limit": 20, "total": 1, "pages": 1},
        })
        assert page.models[0].model_id == "openai/sora-2"
        assert page.pagination.has_more is False


class TestGenerations:

    def test_status_helpers(self) -> None:
        assert GenerationStatus.COMPLETED.is_finished
        assert GenerationStatus.CANCELLED.is_finished
        assert GenerationStatus.PROCESSING.is_running
        assert GenerationStatus.PENDING.display_name == "Pending"

    @pytest.mark.parametrize("ms, expected", [(None, None), (400, "<1s"), (4500, "4.5s"), (125000, "2m 5s")])
    def test_execution_time(self, ms, expected) -> None:
        assert format_execution_time(ms) == expected

    def test_output_urls_are_deduplicated(self, generation_payload) -> None:
        generation = ModelGeneration.model_validate({
            **generation_payload,
            "outputUrls": ["https://cdn.test/out.mp4", "https://cdn.test/alt.mp4"],
        })
        assert generation.all_output_urls == ["https://cdn.test/out.mp4", "https://cdn.test/alt.mp4"]
        assert generation.primary_output_url == "https://cdn.test/out.mp4"

    def test_output_type_from_url_then_category(self, generation_payload) -> None:
        assert ModelGeneration.model_validate(generation_payload).output_type is OutputType.VIDEO

        image = {**generation_payload, "outputUrl": "https://cdn.test/a.PNG"}
        assert ModelGeneration.model_validate(image).output_type is OutputType.IMAGE

        no_url = {**generation_payload, "outputUrl": None, "categorySlug": "music-generation"}
        assert ModelGeneration.model_validate(no_url).output_type is OutputType.AUDIO

        unknown = {**generation_payload, "outputUrl": None, "categorySlug": "text-generation"}
        assert ModelGeneration.model_validate(unknown).output_type is OutputType.TEXT

    def test_media_flags(self, generation_payload) -> None:
        generation = ModelGeneration.model_validate(generation_payload)
        assert generation.is_video_output
        assert not generation.is_image_output
        assert not generation.is_audio_output
        assert generation.execution_time_display == "4.5s"

    def test_execution_result_to_generation(self) -> None:
        response = ExecuteModelResponse.model_validate({
            "success": True,
            "data": {
                "id": "gen-9",
                "modelId": "openai/sora-2",
                "status": "processing",
                "creditsUsed": 10,
                "model": {"name": "Sora 2", "provider": "openai", "category": "video-generation"},
            },
            "credits_deducted": 10,
            "credit_request_id": "req-1",
        })
        assert response.credits_deducted == 10

        generation = response.data.to_generation({"prompt": "x"}, organization_id="org-1", title="T", tags=["a"])
        assert generation.status is GenerationStatus.PROCESSING
        assert generation.category_slug == "video-generation"
        assert generation.organization_id == "org-1"
        assert generation.input == {"prompt": "x"}
        assert generation.is_favorite is False

    def test_unknown_status_becomes_pending(self) -> None:
        response = ExecuteModelResponse.model_validate({
            "data": {"id": "g", "modelId": "a/b", "status": "starting"},
        })
        generation = response.data.to_generation({"prompt": "x"})
        assert generation.status is GenerationStatus.PENDING
        assert generation.category_slug == "unknown"


class TestCredits:

    def test_balance_is_snake_case(self, balance_payload) -> None:
        balance = CreditBalance.model_validate(balance_payload)
        assert balance.total_credits == 150
        assert balance.plan == "pro"
        assert balance.next_reset == datetime(2024, 6, 1, tzinfo=timezone.utc)

    def test_transaction(self) -> None:
        transaction = CreditTransaction.model_validate({
            "id": "t", "type": "deduct", "amount": -10, "balance_before": 150, "balance_after": 140,
            "metadata": {"model_id": "openai/sora-2"}, "created_at": "2024-05-01T12:30:00.000Z",
        })
        assert transaction.metadata.model_id == "openai/sora-2"
        assert transaction.balance_after == 140

    def test_package_pricing(self) -> None:
        package = CreditPackage(id="p", name="Starter", credits=500, price=4.99)
        assert package.price_formatted == "$4.99"
        assert package.credits_per_dollar == pytest.approx(100.2, rel=1e-3)
        assert CreditPackage(id="f", name="Free", credits=10, price=0).credits_per_dollar == 0.0

    def test_compact_count(self) -> None:
        assert compact_count(999) == "999"
        assert compact_count(1000) == "1.0k"
        assert compact_count(12345) == "12.3k"


class TestAuthModels:

    @pytest.mark.parametrize("email, valid", [
        ("ada@example.com", True),
        ("first.last+tag@sub.example.co", True),
        ("ada@example", False),
        ("ada example.com", False),
        ("", False),
    ])
    def test_email_validation(self, email: str, valid: bool) -> None:
        assert is_valid_email(email) is valid

    @pytest.mark.parametrize("password, valid", [
        ("Secret123", True),
        ("secret123", False),
        ("SECRET123", False),
        ("Secretabc", False),
        ("Sec123", False),
    ])
    def test_password_validation(self, password: str, valid: bool) -> None:
        assert is_valid_password(password) is valid

    @pytest.mark.parametrize("password, strength", [
        ("", ""),
        ("abc", "Weak"),
        ("abcdefgh", "Fair"),
        ("Abcdefg1", "Good"),
        ("Abcdefg1!", "Strong"),
    ])
    def test_password_strength(self, password: str, strength: str) -> None:
        assert password_strength(password) == strength

    def test_register_response(self) -> None:
        response = RegisterResponse.model_validate({
            "success": True, "userSub": "sub-1", "needsConfirmation": True,
            "message": "Check your email", "email": "ada@example.com",
        })
        assert response.needs_confirmation is True
        assert response.tokens is None
