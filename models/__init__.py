from models.job_row import CompletionSignal, JobRow, PollBudget, PollState, TimeoutPolicy

__all__ = ['CompletionSignal', 'JobRow', 'PollBudget', 'PollState', 'TimeoutPolicy']
