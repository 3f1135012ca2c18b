"""
Async Agent Gateway for non-blocking agent calls
"""
import asyncio
from concurrent.futures import ThreadPoolExecutor

from models.agent_response import AgentResponse, AgentRole
from utils.logging_config import get_logger

logger = get_logger('services.async_gateway')


class AsyncAgentGateway:
    """
    Runs the blocking AgentGateway in a thread pool so the event loop stays free
    """

    def __init__(self, gateway=None, max_workers: int = 4):
        self.executor = ThreadPoolExecutor(max_workers=max_workers)
        # Set by ServiceFactory to avoid circular imports
        self.gateway = gateway

    def set_gateway(self, gateway):
        self.gateway = gateway

    async def invoke(self, message: str, role: AgentRole) -> AgentResponse:
        if self.gateway is None:
            raise RuntimeError("Gateway not initialized. Call set_gateway() first.")

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self.executor, self.gateway.invoke, message, role)
        except Exception as e:
            logger.error(f"❌ [ASYNC] {role.value} agent call raised: {e}")
            return AgentResponse.failure(str(e))

    def __del__(self):
        """Clean up executor"""
        if hasattr(self, 'executor'):
            self.executor.shutdown(wait=False)
