"""
Service Factory for managing singleton service instances
"""
from typing import Dict, Any

from services.agent_gateway import AgentGateway
from services.async_agent_gateway import AsyncAgentGateway
from services.database_service import DatabaseService
from services.session_registry import SessionRegistry
from utils.logging_config import get_logger

logger = get_logger('services.factory')


class ServiceFactory:
    """
    Factory class to manage singleton service instances
    """

    _instances: Dict[str, Any] = {}

    @classmethod
    def get_agent_gateway(cls) -> AgentGateway:
        """Get singleton agent gateway instance"""
        if 'gateway' not in cls._instances:
            cls._instances['gateway'] = AgentGateway()
            logger.info("Created singleton AgentGateway instance")
        return cls._instances['gateway']

    @classmethod
    def get_async_agent_gateway(cls) -> AsyncAgentGateway:
        """Get singleton async agent gateway instance"""
        if 'async_gateway' not in cls._instances:
            cls._instances['async_gateway'] = AsyncAgentGateway(cls.get_agent_gateway())
            logger.info("Created singleton AsyncAgentGateway instance")
        return cls._instances['async_gateway']

    @classmethod
    def get_database_service(cls) -> DatabaseService:
        """Get singleton database service instance"""
        if 'database' not in cls._instances:
            cls._instances['database'] = DatabaseService()
            logger.info("Created singleton DatabaseService instance")
        return cls._instances['database']

    @classmethod
    def get_session_registry(cls) -> SessionRegistry:
        """Get singleton session registry instance"""
        if 'registry' not in cls._instances:
            cls._instances['registry'] = SessionRegistry(
                cls.get_async_agent_gateway(),
                store=cls.get_database_service()
            )
            logger.info("Created singleton SessionRegistry instance")
        return cls._instances['registry']
