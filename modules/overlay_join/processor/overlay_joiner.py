"""OverlayJoiner Implementation

This module implements the OverlayJoiner class, the entry point that wires
environment configuration, the shapely geometry capability and the overlay
join engine together.
"""

import logging
import threading
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from geojoin.config.config_loader import ConfigLoader
from geojoin.exceptions import GeoJoinConfigurationError
from geojoin.interfaces import GeometryCapability
from geojoin.utils import setup_logging, log_performance
from ..geometry import ShapelyGeometryCapability, blocks_from_features, submissions_from_features
from ..join_engine import JoinConfig, JoinRunResult, OverlayJoinEngine
from ..models import Block, Submission

logger = logging.getLogger(__name__)

FeatureInput = Union[Mapping[str, Any], Iterable[Mapping[str, Any]]]


class JoinerStatus(BaseModel):
    """Status data model for joiner health and configuration reporting."""

    module_name: str = Field("overlay_join", description="Name of the processing module")
    environment: str = Field(..., description="Configured environment name")
    is_configured: bool = Field(..., description="Whether the join configuration is valid")
    last_run: Optional[datetime] = Field(None, description="Timestamp of the last completed join run")
    last_total_intersections: Optional[int] = Field(None, ge=0, description="Total of the last run")
    status: str = Field(..., description="Current status: 'ready', 'running', 'error'")


class OverlayJoiner:
    """Block/submission overlay joiner.

    Loads the ``join`` section for an environment through ConfigLoader,
    validates it as a JoinConfig, and runs the OverlayJoinEngine with the
    shapely capability unless another capability is injected.
    """

    def __init__(self, config_loader: Optional[ConfigLoader] = None,
                 environment: str = "development",
                 capability: Optional[GeometryCapability] = None):
        """Initialize the joiner.

        Args:
            config_loader: ConfigLoader for environment configuration; defaults
                are used when omitted
            environment: Environment whose configuration is used
            capability: Geometry capability; ShapelyGeometryCapability by default
        """
        self.config_loader = config_loader
        self.environment = environment
        self.capability = capability or ShapelyGeometryCapability()
        self._join_config: Optional[JoinConfig] = None
        self._last_run: Optional[datetime] = None
        self._last_result: Optional[JoinRunResult] = None
        self._running = False

        logger.info(f"OverlayJoiner initialized for environment: {environment}")

    def get_join_config(self) -> JoinConfig:
        """Get the validated join configuration, loading it if necessary.

        Raises:
            GeoJoinConfigurationError: If the join section is missing or invalid
        """
        if self._join_config is None:
            self._join_config = self._load_join_config()
        return self._join_config

    def validate_configuration(self) -> bool:
        """Check that the join configuration loads and validates."""
        try:
            config = self.get_join_config()
        except GeoJoinConfigurationError as e:
            logger.error(f"Join configuration invalid: {e}")
            return False

        logger.info(f"Join configuration valid: {config.model_dump()}")
        return True

    def configure_logging(self) -> None:
        """Apply the environment's logging section."""
        if self.config_loader is None:
            setup_logging(environment=self.environment)
            return

        logging_config = self.config_loader.get_logging_config(self.environment)
        setup_logging(
            environment="production" if logging_config.get("format") == "json" else "development",
            log_level=logging_config.get("level", "INFO"),
            log_dir=logging_config.get("log_dir")
        )

    @log_performance
    def join(self, blocks: Iterable[Block], submissions: Iterable[Submission],
             cancel_event: Optional[threading.Event] = None) -> JoinRunResult:
        """Run the overlay join over pre-loaded blocks and submissions.

        Args:
            blocks: Block set with precomputed areas
            submissions: Submission set
            cancel_event: Optional event checked between submissions

        Returns:
            JoinRunResult with the result table and statistics
        """
        engine = OverlayJoinEngine(self.capability, self.get_join_config())

        self._running = True
        try:
            result = engine.run(blocks, submissions, cancel_event=cancel_event)
        finally:
            self._running = False

        self._last_run = result.processing_timestamp
        self._last_result = result
        return result

    def join_features(self, block_features: FeatureInput, submission_features: FeatureInput,
                      block_id_property: str = "geoid20",
                      block_area_property: Optional[str] = None,
                      submission_id_property: str = "id",
                      submission_label_property: str = "neighborhood",
                      cancel_event: Optional[threading.Event] = None) -> JoinRunResult:
        """Run the overlay join over in-memory GeoJSON features.

        Args:
            block_features: FeatureCollection mapping or iterable of block features
            submission_features: FeatureCollection mapping or iterable of submission features
            block_id_property: Block property holding the identifier
            block_area_property: Block property holding a precomputed area; computed when None
            submission_id_property: Submission property holding the integer identifier
            submission_label_property: Submission property holding the label
            cancel_event: Optional event checked between submissions

        Returns:
            JoinRunResult with the result table and statistics
        """
        blocks = blocks_from_features(block_features, self.capability,
                                      id_property=block_id_property,
                                      area_property=block_area_property)
        submissions = submissions_from_features(submission_features,
                                                id_property=submission_id_property,
                                                label_property=submission_label_property)
        return self.join(blocks, submissions, cancel_event=cancel_event)

    def get_status(self) -> JoinerStatus:
        """Get current joiner status."""
        is_configured = self.validate_configuration()
        if self._running:
            status = "running"
        elif is_configured:
            status = "ready"
        else:
            status = "error"

        return JoinerStatus(
            environment=self.environment,
            is_configured=is_configured,
            last_run=self._last_run,
            last_total_intersections=self._last_result.total_intersections if self._last_result else None,
            status=status
        )

    def _load_join_config(self) -> JoinConfig:
        if self.config_loader is None:
            logger.debug("No configuration loader supplied, using default join settings")
            return JoinConfig()

        settings = self.config_loader.get_join_settings(self.environment)
        try:
            return JoinConfig(**settings)
        except ValidationError as e:
            raise GeoJoinConfigurationError(
                f"Invalid join configuration: {e}",
                {"environment": self.environment}
            ) from e
