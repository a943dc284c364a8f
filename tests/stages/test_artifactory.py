"""Tests for the Artifactory stage."""

from __future__ import annotations

import base64
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from shipyard.artifact.models import Artifact, ArtifactExtras, ArtifactType
from shipyard.config.models import ProjectConfig, UploadConfig
from shipyard.context import ReleaseContext
from shipyard.http.exceptions import ArtifactoryResponseError, ResponseError, UploadConfigError, UploadError
from shipyard.stages.artifactory import ArtifactoryStage, check_artifactory_response


class TestCheckArtifactoryResponse:
    """Tests for check_artifactory_response."""

    @pytest.mark.parametrize("status", [200, 201, 204])
    def test_success(self, status: int) -> None:
        """2xx answers pass."""
        check_artifactory_response(httpx.Response(status))

    def test_errors_document(self) -> None:
        """The errors list is decoded."""
        response = httpx.Response(
            409,
            json={"errors": [{"status": 409, "message": "Conflict"}, {"status": 403, "message": "Forbidden"}]},
        )
        with pytest.raises(ArtifactoryResponseError) as exc_info:
            check_artifactory_response(response)
        err = exc_info.value
        assert err.status_code == 409
        assert err.errors == [(409, "Conflict"), (403, "Forbidden")]
        assert str(err) == "artifactory error 409 (409: Conflict, 403: Forbidden)"

    def test_plain_text_body(self) -> None:
        """A body that is not JSON falls back to ResponseError."""
        with pytest.raises(ResponseError) as exc_info:
            check_artifactory_response(httpx.Response(502, text="Bad Gateway"))
        assert not isinstance(exc_info.value, ArtifactoryResponseError)
        assert exc_info.value.body == "Bad Gateway"

    @pytest.mark.parametrize("document", [{}, {"errors": []}, {"errors": "nope"}, ["errors"]])
    def test_json_without_errors(self, document: object) -> None:
        """JSON without a usable errors list falls back to ResponseError."""
        with pytest.raises(ResponseError) as exc_info:
            check_artifactory_response(httpx.Response(400, json=document))
        assert not isinstance(exc_info.value, ArtifactoryResponseError)

    def test_error_status_missing(self) -> None:
        """An error without status inherits the response status."""
        with pytest.raises(ArtifactoryResponseError) as exc_info:
            check_artifactory_response(httpx.Response(401, json={"errors": [{"message": "Unauthorized"}]}))
        assert exc_info.value.errors == [(401, "Unauthorized")]


class TestArtifactoryStage:
    """Tests for ArtifactoryStage."""

    def test_label_and_skip(self, make_ctx: Callable[..., ReleaseContext]) -> None:
        """The stage only runs with Artifactory targets."""
        stage = ArtifactoryStage()
        assert str(stage) == "artifactory"
        assert stage.skip(make_ctx(ProjectConfig(uploads=[UploadConfig(name="a")])))
        assert not stage.skip(make_ctx(ProjectConfig(artifactories=[UploadConfig(name="a")])))

    def test_run(self, make_ctx: Callable[..., ReleaseContext], tmp_path: Path) -> None:
        """Artifacts go to the templated target with ARTIFACTORY_* credentials."""
        seen: list[httpx.Request] = []

        def _handle(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"repo": "example-repo-local"})

        path = tmp_path / "blah_1.2.3_linux_amd64.tar.gz"
        path.write_bytes(b"archive")
        config = ProjectConfig(
            project_name="blah",
            artifactories=[
                UploadConfig(
                    name="production",
                    target="https://artifacts.example.com/example-repo-local/{{ project_name }}/{{ version }}/",
                    username="deployuser",
                    checksum_header="X-Checksum-SHA256",
                )
            ],
        )
        ctx = make_ctx(config, env={"ARTIFACTORY_PRODUCTION_SECRET": "deployuser-secret"})
        ctx.artifacts.add(
            Artifact(
                name=path.name,
                path=str(path),
                type=ArtifactType.UPLOADABLE_ARCHIVE,
                goos="linux",
                goarch="amd64",
                extra=ArtifactExtras(id="default", format="tar.gz"),
            )
        )

        stage = ArtifactoryStage(client_factory=lambda _: httpx.Client(transport=httpx.MockTransport(_handle)))
        stage.default(ctx)
        stage.run(ctx)

        assert len(seen) == 1
        request = seen[0]
        assert str(request.url) == (
            "https://artifacts.example.com/example-repo-local/blah/1.2.3/blah_1.2.3_linux_amd64.tar.gz"
        )
        assert request.method == "PUT"
        token = base64.b64encode(b"deployuser:deployuser-secret").decode("ascii")
        assert request.headers["Authorization"] == f"Basic {token}"
        assert "X-Checksum-SHA256" in request.headers

    def test_upload_credentials_are_not_used(self, make_ctx: Callable[..., ReleaseContext]) -> None:
        """The generic UPLOAD_* secret does not satisfy an Artifactory target."""
        config = ProjectConfig(
            artifactories=[UploadConfig(name="production", target="https://a.example.com", username="u")]
        )
        ctx = make_ctx(config, env={"UPLOAD_PRODUCTION_SECRET": "x"})
        stage = ArtifactoryStage()
        stage.default(ctx)
        with pytest.raises(UploadConfigError, match="ARTIFACTORY_PRODUCTION_SECRET"):
            stage.run(ctx)

    def test_error_document_reported(self, make_ctx: Callable[..., ReleaseContext], tmp_path: Path) -> None:
        """Artifactory error messages reach the raised UploadError."""
        path = tmp_path / "app.deb"
        path.write_bytes(b"deb")
        config = ProjectConfig(artifactories=[UploadConfig(name="production", target="https://a.example.com")])
        ctx = make_ctx(config)
        ctx.artifacts.add(Artifact(name="app.deb", path=str(path), type=ArtifactType.LINUX_PACKAGE))

        def _reject(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"errors": [{"status": 400, "message": "Bad Request"}]})

        stage = ArtifactoryStage(client_factory=lambda _: httpx.Client(transport=httpx.MockTransport(_reject)))
        stage.default(ctx)
        with pytest.raises(UploadError, match="400: Bad Request") as exc_info:
            stage.run(ctx)
        assert isinstance(exc_info.value.__cause__, ArtifactoryResponseError)
