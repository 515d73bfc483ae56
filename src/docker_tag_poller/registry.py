"""Async functional poller operations."""

from collections.abc import Mapping
from typing import Any

from .core.registry_poller import RegistryPoller
from .core.types import ConnectionCheckResult, Revision, ValidationResult
from .utils.validator import package_configuration as _package_configuration
from .utils.validator import repository_configuration as _repository_configuration
from .utils.validator import (
    validate_package_configuration as _validate_package_configuration,
)
from .utils.validator import (
    validate_repository_configuration as _validate_repository_configuration,
)


def repository_configuration() -> dict[str, dict[str, Any]]:
    """저장소(레지스트리) 설정 스키마를 반환합니다.

    Returns:
        dict: 속성 키별 표시 이름, 순서, 필수 여부 등
            (예: {"DOCKER_REGISTRY_URL": {"display-name": ..., "required": True}})
    """
    return _repository_configuration()


def package_configuration() -> dict[str, dict[str, Any]]:
    """패키지(이미지) 설정 스키마를 반환합니다.

    Returns:
        dict: 이미지 이름과 태그 필터 속성의 스키마
    """
    return _package_configuration()


def validate_repository_configuration(props: Mapping[str, Any]) -> ValidationResult:
    """저장소 설정 값을 검증합니다.

    Args:
        props: 호스트가 전달한 속성 맵
            (예: {"DOCKER_REGISTRY_URL": {"value": "https://registry-1.docker.io/v2/"}})

    Returns:
        ValidationResult: 오류 목록 (비어 있으면 유효)
    """
    return _validate_repository_configuration(props)


def validate_package_configuration(props: Mapping[str, Any]) -> ValidationResult:
    """패키지 설정 값을 검증합니다.

    Args:
        props: 호스트가 전달한 속성 맵 (예: {"DOCKER_IMAGE": "library/debian"})

    Returns:
        ValidationResult: 오류 목록 (비어 있으면 유효)
    """
    return _validate_package_configuration(props)


async def check_connection_to_repository(
    repository: Mapping[str, Any], timeout: int = 30
) -> ConnectionCheckResult:
    """레지스트리 연결 상태를 확인합니다.

    설정을 먼저 검증하고, 유효하면 레지스트리 URL 응답의
    docker-distribution-api-version 헤더를 확인합니다.

    Args:
        repository: 저장소 속성 맵
        timeout: 요청 타임아웃 (초, 기본값: 30초)

    Returns:
        ConnectionCheckResult: 성공 여부와 진단 메시지

    Examples:
        result = await check_connection_to_repository(
            {"DOCKER_REGISTRY_URL": "https://registry-1.docker.io/v2/",
             "DOCKER_REGISTRY_NAME": "dockerhub"}
        )
        print(result.success, result.messages)
    """
    async with RegistryPoller(timeout=timeout) as poller:
        return await poller.check_connection_to_repository(repository)


async def check_connection_to_package(
    package: Mapping[str, Any], repository: Mapping[str, Any], timeout: int = 30
) -> ConnectionCheckResult:
    """이미지 태그 목록 URL의 연결 상태를 확인합니다.

    Args:
        package: 패키지 속성 맵
        repository: 저장소 속성 맵
        timeout: 요청 타임아웃 (초, 기본값: 30초)

    Returns:
        ConnectionCheckResult: 성공 여부와 진단 메시지
    """
    async with RegistryPoller(timeout=timeout) as poller:
        return await poller.check_connection_to_package(package, repository)


async def get_latest_revision(
    package: Mapping[str, Any], repository: Mapping[str, Any], timeout: int = 30
) -> Revision:
    """필터와 일치하는 가장 최신 태그를 조회합니다.

    Args:
        package: 패키지 속성 맵 (이미지 이름, 태그 필터)
        repository: 저장소 속성 맵
        timeout: 요청 타임아웃 (초, 기본값: 30초)

    Returns:
        Revision: 최신 태그 (일치하는 태그가 없으면 빈 Revision)

    Raises:
        InvalidFilterError: 태그 필터가 올바른 정규식이 아닌 경우
        ParseError: 태그 목록 응답이 잘못된 경우

    Examples:
        revision = await get_latest_revision(
            {"DOCKER_IMAGE": "library/debian", "DOCKER_TAG_FILTER": "^[0-9.]+$"},
            {"DOCKER_REGISTRY_URL": "https://registry-1.docker.io/v2/"},
        )
        print(revision.to_dict())
    """
    async with RegistryPoller(timeout=timeout) as poller:
        return await poller.get_latest_revision(package, repository)


async def get_latest_revision_since(
    package: Mapping[str, Any],
    repository: Mapping[str, Any],
    previous: Mapping[str, Any] | Revision | None,
    timeout: int = 30,
) -> Revision:
    """이전 리비전보다 새로운 최신 태그를 조회합니다.

    Args:
        package: 패키지 속성 맵
        repository: 저장소 속성 맵
        previous: 이전에 받은 리비전 (Revision 또는 직렬화된 딕셔너리)
        timeout: 요청 타임아웃 (초, 기본값: 30초)

    Returns:
        Revision: 새 태그가 있으면 최신 Revision, 없으면 빈 Revision
    """
    async with RegistryPoller(timeout=timeout) as poller:
        return await poller.get_latest_revision_since(package, repository, previous)
