import time
import logging
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..audits.dto import AuditFiltersDto, CreateTradeAuditDto, TradeOutcome
from ..audits.responses import StreakReportResponse
from ..audits.service import AuditsService, audits_service
from ..bots.dto import BotStatus, UpdateBotDto
from ..bots.responses import BotResponse
from ..bots.service import BotsService, bots_service
from ..database import MirrorStore
from ..exceptions import BotNotFoundError
from ..sessions.dto import PublishSessionStateDto
from ..sessions.responses import SessionStateResponse
from ..sessions.service import SessionsService, sessions_service
from .executor import TradeExecutor, TradeResult

logger = logging.getLogger(__name__)


class RunSummary(BaseModel):
    """Outcome of one trading run"""
    bot_id: UUID
    session_id: str
    session: Optional[SessionStateResponse]
    streaks: StreakReportResponse


def new_session_id() -> str:
    return f"session-{int(time.time() * 1000)}-{uuid4().hex[:8]}"


def apply_trade(state: PublishSessionStateDto, result: TradeResult) -> PublishSessionStateDto:
    """
    Fold one settled trade into the running session metrics.

    Unsettled (PENDING) results leave the state unchanged so that
    number_of_runs stays equal to number_of_wins + number_of_losses.
    """
    is_win = result.outcome == TradeOutcome.WIN.value
    is_loss = result.outcome == TradeOutcome.LOSS.value
    if not (is_win or is_loss):
        return state

    payout = result.payout
    if payout is None:
        payout = result.amount_staked + result.profit_or_loss if is_win else 0.0

    return state.model_copy(update={
        "number_of_runs": state.number_of_runs + 1,
        "number_of_wins": state.number_of_wins + (1 if is_win else 0),
        "number_of_losses": state.number_of_losses + (1 if is_loss else 0),
        "total_stake": state.total_stake + result.amount_staked,
        "total_payout": state.total_payout + payout,
        "total_profit": state.total_profit + result.profit_or_loss,
        "commission_payout": state.commission_payout + result.commission,
        "real_commission_payout": state.real_commission_payout + result.real_commission,
    })


class TradingRunService:
    """
    Drives one trading run of a bot.

    Every trade is handled strictly in order: execute, publish the full
    session snapshot, append the audit record. A PersistenceError from any
    step aborts the run and propagates; the bot is then left RUNNING for the
    caller to resolve.
    """

    def __init__(
        self,
        bots: BotsService = bots_service,
        sessions: SessionsService = sessions_service,
        audits: AuditsService = audits_service,
    ):
        self.bots = bots
        self.sessions = sessions
        self.audits = audits

    async def run_session(
        self,
        db: AsyncSession,
        mirror: MirrorStore,
        owner_id: str,
        bot_id: UUID,
        executor: TradeExecutor,
        strategy: str,
        trades: int,
        session_id: Optional[str] = None,
    ) -> RunSummary:
        bot = await self.bots.get_bot(db, owner_id, bot_id)
        if bot is None:
            raise BotNotFoundError(owner_id, bot_id)

        session_id = session_id or new_session_id()
        bot = await self.bots.update_bot(
            db, mirror, owner_id, bot_id,
            UpdateBotDto(status=BotStatus.RUNNING, is_active=True),
        )
        logger.info(f"🚀 Bot {bot_id} running session {session_id} with {strategy} for {trades} trades")

        state = PublishSessionStateDto(bot_id=bot_id, session_id=session_id, current_strategy=strategy)
        published: Optional[SessionStateResponse] = None

        for number in range(1, trades + 1):
            result = await executor.execute(bot)

            state = apply_trade(state, result)
            published = await self.sessions.publish_session_state(mirror, state)

            await self.audits.append_audit(db, self._audit_for(bot, state, result))
            logger.info(
                f"Trade {number}/{trades} of session {session_id}: "
                f"{result.outcome} {result.profit_or_loss:+.2f}"
            )

        await self.bots.update_bot(
            db, mirror, owner_id, bot_id,
            UpdateBotDto(status=BotStatus.STOPPED, is_active=False),
        )

        streaks = await self.audits.get_streaks(
            db, AuditFiltersDto(owner_id=owner_id, bot_id=bot_id, session_id=session_id)
        )
        return RunSummary(bot_id=bot_id, session_id=session_id, session=published, streaks=streaks)

    @staticmethod
    def _audit_for(bot: BotResponse, state: PublishSessionStateDto, result: TradeResult) -> CreateTradeAuditDto:
        return CreateTradeAuditDto(
            owner_id=bot.owner_id,
            bot_id=bot.id,
            session_id=state.session_id,
            strategy_used=state.current_strategy,
            proposal_id=result.proposal_id,
            amount=result.amount_staked,
            basis=result.basis,
            contract_type=bot.contract_type,
            currency=result.currency,
            duration=bot.duration,
            duration_unit=bot.duration_unit,
            symbol=bot.symbol,
            barrier=result.barrier,
            outcome=result.outcome,
            profit_or_loss=result.profit_or_loss,
        )


# Create service instance
trading_run_service = TradingRunService()
